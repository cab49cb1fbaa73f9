"""Combine slide rasters into a single PDF, one full-bleed image per page."""

from __future__ import annotations

import os
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import PAGE_HEIGHT, PAGE_WIDTH
from .errors import AssemblyError


def _read_all(paths: Iterable[Path]) -> List[Tuple[Path, bytes]]:
    images: List[Tuple[Path, bytes]] = []
    for path in paths:
        path = Path(path)
        try:
            images.append((path, path.read_bytes()))
        except OSError as exc:
            raise AssemblyError(f"Cannot read slide image {path}: {exc}") from exc
    return images


def assemble(paths: Iterable[Path], page_size: Tuple[float, float] = (PAGE_WIDTH, PAGE_HEIGHT)) -> bytes:
    """Build the PDF in memory; pages follow ``paths`` order.

    Every image is stretched to fill its page from the origin, whatever its
    own aspect ratio.
    """
    images = _read_all(paths)
    if not images:
        raise AssemblyError("No slide images to assemble")

    width, height = page_size
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height), pageCompression=1)
    pdf.setCreator("presgen")
    for path, data in images:
        try:
            image = ImageReader(BytesIO(data))
        except Exception as exc:
            raise AssemblyError(f"Cannot decode slide image {path}: {exc}") from exc
        pdf.drawImage(image, 0, 0, width=width, height=height)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def write_document(paths: Iterable[Path], output_path: Path, page_size: Tuple[float, float] = (PAGE_WIDTH, PAGE_HEIGHT)) -> Path:
    """Assemble ``paths`` and replace ``output_path`` in one step."""
    payload = assemble(paths, page_size)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.stem}-", suffix=".pdf.tmp", dir=output_path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.replace(tmp_name, output_path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise AssemblyError(f"Cannot write {output_path}: {exc}") from exc
    return output_path
