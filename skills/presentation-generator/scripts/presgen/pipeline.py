"""End-to-end run: fonts, assets, seven slides, PDF, cleanup."""

from __future__ import annotations

import enum
import traceback
from pathlib import Path
from typing import Callable, List, Optional

from . import console
from .config import DEFAULT_EVENT, HEIGHT, WIDTH, EventConfig, GeneratorPaths, default_paths, resolve_font_path
from .document import write_document
from .errors import FontSourceError, PresentationError
from .fonts import FontSet, check_font_source, load_fonts
from .layout import Box, data_uri
from .render import render
from .slides import slide_specs

Renderer = Callable[[Box, int, int, FontSet], bytes]

FONT_HINT = "Please provide font path using --font option or ensure astro-design submodule is available"


class Stage(enum.Enum):
    IDLE = "idle"
    FONT_RESOLUTION = "font resolution"
    FONT_DERIVATION = "font derivation"
    ASSET_LOAD = "asset load"
    SLIDE_GENERATION = "slide generation"
    DOCUMENT_ASSEMBLY = "document assembly"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


def load_logo_data_uri(path: Path) -> str:
    """Read a PNG logo and embed it as a data URI."""
    try:
        payload = Path(path).read_bytes()
    except OSError as exc:
        raise PresentationError(f"Cannot read logo {path}: {exc}") from exc
    return data_uri("image/png", payload)


def cleanup_slides(slides_dir: Path) -> None:
    """Delete generated PNGs from ``slides_dir``; never raises.

    A missing directory counts as already clean. A file that cannot be
    removed is reported and skipped.
    """
    slides_dir = Path(slides_dir)
    try:
        entries = sorted(slides_dir.glob("*.png"))
    except OSError as exc:
        console.warning(f"Could not list {slides_dir}: {exc}")
        return
    for entry in entries:
        try:
            entry.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            console.warning(f"Could not remove {entry}: {exc}")


class Pipeline:
    """One generation run; ``stage`` tracks progress and names the failing step."""

    def __init__(
        self,
        *,
        verbose: bool = False,
        font_path: Optional[str] = None,
        event: Optional[EventConfig] = None,
        paths: Optional[GeneratorPaths] = None,
        output_path: Optional[Path] = None,
        renderer: Renderer = render,
        debug: bool = False,
    ):
        self.verbose = verbose
        self.debug = debug
        self.event = event or DEFAULT_EVENT
        self.paths = paths or default_paths()
        self.font_source = resolve_font_path(font_path, self.paths)
        self.output_path = Path(output_path) if output_path else self.paths.pdf_path
        self.renderer = renderer
        self.stage = Stage.IDLE
        self.written: List[Path] = []

    def _info(self, text: str) -> None:
        if self.verbose:
            console.info(text)

    def run(self) -> bool:
        spinner = console.Spinner("Generating presentation")
        spinner.start()

        self.stage = Stage.FONT_RESOLUTION
        try:
            check_font_source(self.font_source)
        except FontSourceError as exc:
            self.stage = Stage.FAILED
            spinner.stop(False)
            console.error(str(exc))
            console.info(FONT_HINT)
            return False

        try:
            self._generate()
        except Exception as exc:
            failed_during = self.stage
            self.stage = Stage.FAILED
            spinner.stop(False)
            if self.debug:
                traceback.print_exc()
            console.error(f"Failed to generate presentation: {exc}")
            self._info(f"Failed during {failed_during.value}")
            return False

        spinner.stop(True)
        console.success(f"Presentation generated: {self.output_path}")
        return True

    def _generate(self) -> None:
        paths = self.paths

        self.stage = Stage.FONT_DERIVATION
        self._info("Loading fonts and assets...")
        fonts = load_fonts(self.font_source, paths.cache_dir)

        self.stage = Stage.ASSET_LOAD
        logo = load_logo_data_uri(paths.logo_path)
        secondary_logo = load_logo_data_uri(paths.secondary_logo_path)

        self.stage = Stage.SLIDE_GENERATION
        paths.slides_dir.mkdir(parents=True, exist_ok=True)
        self.written = []
        for spec in slide_specs(self.event, logo, secondary_logo):
            self._info(f"  Generating {spec.name}...")
            png = self.renderer(spec.build(), WIDTH, HEIGHT, fonts)
            target = paths.slides_dir / f"{spec.name}.png"
            target.write_bytes(png)
            self.written.append(target)
            if self.verbose:
                console.success(f"    Created {spec.name}.png ({len(png) / 1024:.1f} KB)")

        self.stage = Stage.DOCUMENT_ASSEMBLY
        self._info("Generating PDF...")
        write_document(self.written, self.output_path)

        self.stage = Stage.CLEANUP
        self._info("Cleaning up temporary PNG files...")
        cleanup_slides(paths.slides_dir)
        self.stage = Stage.DONE


def generate_presentation(
    *,
    verbose: bool = False,
    font_path: Optional[str] = None,
    event: Optional[EventConfig] = None,
    paths: Optional[GeneratorPaths] = None,
    output_path: Optional[Path] = None,
    renderer: Renderer = render,
    debug: bool = False,
) -> bool:
    """Run the full pipeline; ``True`` once the PDF is written and slides are cleaned up."""
    pipeline = Pipeline(
        verbose=verbose,
        font_path=font_path,
        event=event,
        paths=paths,
        output_path=output_path,
        renderer=renderer,
        debug=debug,
    )
    return pipeline.run()
