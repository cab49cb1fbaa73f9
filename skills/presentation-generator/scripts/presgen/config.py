"""Static layout data and filesystem locations for the presentation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

# Slide canvas (4K, 16:9)
WIDTH = 3840
HEIGHT = 2160

# PDF page size in points
PAGE_WIDTH = 1920
PAGE_HEIGHT = 1080

# Controls how quickly orb opacity fades toward the edge
ORB_GRADIENT_FADE = 0.4

FONT_FAMILY = "Cupertino"
FONT_CACHE_STEM = "Cupertino-OG"
FONT_WEIGHTS = {
    "regular": 400,
    "medium": 500,
    "bold": 700,
}

SKILL_DIR = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Palette:
    bg: str = "#000000"
    blue: str = "#2563eb"
    deep_blue: str = "#1e40af"
    indigo: str = "#4f46e5"
    cyan: str = "#0891b2"
    text: str = "#ffffff"
    text_secondary: str = "#a1a1a1"


@dataclass(frozen=True)
class OrbConfig:
    width: str
    height: str
    color: str
    opacity: float
    top: Optional[str] = None
    left: Optional[str] = None
    right: Optional[str] = None
    bottom: Optional[str] = None


@dataclass(frozen=True)
class Activity:
    name: str
    room: str
    time: str


@dataclass(frozen=True)
class MiscActivity:
    name: str
    room: str


@dataclass(frozen=True)
class LinkSlide:
    """A QR slide pointing at an external URL."""

    name: str
    title: str
    subtitle: str
    url: str


PALETTE = Palette()

SLIDE_ORBS: Tuple[OrbConfig, ...] = (
    OrbConfig(top="-800px", right="-400px", width="2400px", height="2400px", color=PALETTE.blue, opacity=28),
    OrbConfig(bottom="-1000px", left="-600px", width="2800px", height="2800px", color=PALETTE.deep_blue, opacity=22),
    OrbConfig(top="40%", right="15%", width="1600px", height="1600px", color=PALETTE.indigo, opacity=18),
    OrbConfig(top="-400px", left="5%", width="1400px", height="1400px", color=PALETTE.cyan, opacity=14),
)

SCHEDULED_ACTIVITIES: Tuple[Activity, ...] = (
    Activity(name="Kahoot", room="Grand Amphi", time="23:00"),
    Activity(name="Kahoot", room="Grand Amphi", time="00:00"),
)

MISC_ACTIVITIES: Tuple[MiscActivity, ...] = (
    MiscActivity(name="Escape Game", room="Salle 117"),
    MiscActivity(name="Console & Jeux de societe", room="Salle 111"),
    MiscActivity(name="Film", room="Grand Amphi"),
)

DISCORD_URL = "https://discord.gg/fxWsSSee"
NDI_URL = "https://www.nuitdelinfo.com/"
ASSO_URL = "https://asso.info-evry.fr"
SUBJECT_URL = "https://filesender.renater.fr/?s=download&token=1ee59758-cb41-400c-b6c2-47fc37e1804e"

LINK_SLIDES: Tuple[LinkSlide, ...] = (
    LinkSlide(name="02-discord", title="Discord", subtitle="Discord de l'evenement a Evry", url=DISCORD_URL),
    LinkSlide(
        name="03-nuitdelinfo",
        title="Nuit de l'Info",
        subtitle="Site officiel - Inscription aux defis avant 21h",
        url=NDI_URL,
    ),
    LinkSlide(
        name="07-sujet",
        title="Sujet de la Nuit",
        subtitle="Telechargez le sujet officiel de l'evenement",
        url=SUBJECT_URL,
    ),
)


@dataclass(frozen=True)
class EventConfig:
    """Everything the slide builders need besides fonts and images."""

    association_name: str = "Asso Info Evry"
    tagline: str = "Association des Etudiants en Informatique"
    association_url: str = ASSO_URL
    links: Tuple[LinkSlide, ...] = LINK_SLIDES
    activities: Tuple[Activity, ...] = SCHEDULED_ACTIVITIES
    misc_activities: Tuple[MiscActivity, ...] = MISC_ACTIVITIES
    escape_game_room: str = "Salle 117"
    escape_game_availability: str = "Disponible toute la nuit"
    orbs: Tuple[OrbConfig, ...] = SLIDE_ORBS
    palette: Palette = field(default_factory=Palette)


DEFAULT_EVENT = EventConfig()


@dataclass(frozen=True)
class GeneratorPaths:
    root_dir: Path
    assets_dir: Path
    cache_dir: Path
    output_dir: Path
    slides_dir: Path
    logo_path: Path
    secondary_logo_path: Path
    default_font_path: Path

    @classmethod
    def from_root(cls, root: Path, *, output_dir: Optional[Path] = None) -> "GeneratorPaths":
        root = Path(root).resolve()
        assets_dir = root / "assets"
        output = Path(output_dir).resolve() if output_dir else root / "output"
        return cls(
            root_dir=root,
            assets_dir=assets_dir,
            cache_dir=root / ".cache",
            output_dir=output,
            slides_dir=output / "slides",
            logo_path=assets_dir / "AIE.png",
            secondary_logo_path=assets_dir / "lockedup.logo.png",
            default_font_path=(root / ".." / "astro-design" / "src" / "fonts" / "Cupertino-Pro-Full.woff2").resolve(),
        )

    @property
    def pdf_path(self) -> Path:
        return self.output_dir / "presentation.pdf"


def default_paths() -> GeneratorPaths:
    """Paths rooted at the skill directory, honouring ``PRESGEN_OUTPUT_DIR``."""
    output_dir = os.environ.get("PRESGEN_OUTPUT_DIR", "").strip()
    return GeneratorPaths.from_root(SKILL_DIR, output_dir=Path(output_dir) if output_dir else None)


def resolve_font_path(explicit: Optional[str], paths: GeneratorPaths) -> Path:
    """Pick the font source: explicit flag, then ``PRESGEN_FONT``, then the default location."""
    if explicit:
        return Path(explicit).expanduser()
    env_font = os.environ.get("PRESGEN_FONT", "").strip()
    if env_font:
        return Path(env_font).expanduser()
    return paths.default_font_path
