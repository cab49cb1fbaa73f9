"""QR code encoding to standalone SVG documents."""

from __future__ import annotations

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from .layout import data_uri

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def _qr_matrix(url: str, error_correction: str) -> list[list[bool]]:
    level = ERROR_CORRECTION_LEVELS.get(error_correction.upper())
    if level is None:
        allowed = ", ".join(sorted(ERROR_CORRECTION_LEVELS))
        raise ValueError(f"Unsupported error correction level '{error_correction}' (supported: {allowed})")
    qr = qrcode.QRCode(version=None, error_correction=level, box_size=1, border=0)
    qr.add_data(url)
    qr.make(fit=True)
    return qr.get_matrix()


def _module_path(matrix: list[list[bool]]) -> str:
    # One subpath per horizontal run of dark modules.
    parts: list[str] = []
    for y, row in enumerate(matrix):
        x = 0
        while x < len(row):
            if not row[x]:
                x += 1
                continue
            start = x
            while x < len(row) and row[x]:
                x += 1
            run = x - start
            parts.append(f"M{start} {y}h{run}v1h-{run}z")
    return "".join(parts)


def encode_qr(
    url: str,
    size: int = 300,
    *,
    color: str = "#ffffff",
    background: str = "transparent",
    error_correction: str = "M",
) -> bytes:
    """Encode ``url`` as a ``size``x``size`` SVG with no quiet zone."""
    if size <= 0:
        raise ValueError("QR size must be positive")
    matrix = _qr_matrix(url, error_correction)
    modules = len(matrix)

    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>',
        (
            f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" width="{size}" height="{size}" '
            f'viewBox="0 0 {modules} {modules}" shape-rendering="crispEdges">'
        ),
    ]
    if background and background != "transparent":
        lines.append(f'<rect x="0" y="0" width="{modules}" height="{modules}" fill="{background}"/>')
    lines.append(f'<path fill="{color}" d="{_module_path(matrix)}"/>')
    lines.append("</svg>")
    return ("\n".join(lines) + "\n").encode("utf-8")


def qr_data_uri(url: str, size: int = 300) -> str:
    return data_uri("image/svg+xml", encode_qr(url, size))
