"""Coloured terminal output and a minimal progress spinner."""

from __future__ import annotations

import os
import sys
import time
from typing import Optional

CI_VARIABLES = ("CI", "GITHUB_ACTIONS", "GITLAB_CI", "CIRCLECI", "JENKINS_URL")

COLORS = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "cyan": "\x1b[36m",
}

ICONS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "ℹ",
}


def is_ci() -> bool:
    return any(os.environ.get(name) for name in CI_VARIABLES)


def use_color() -> bool:
    if os.environ.get("NO_COLOR") or is_ci():
        return False
    return sys.stdout.isatty()


def paint(text: str, color: str) -> str:
    if not use_color():
        return text
    return f"{COLORS[color]}{text}{COLORS['reset']}"


def header(text: str) -> None:
    line = "═" * (len(text) + 4)
    print()
    print(paint(f"╔{line}╗", "cyan"))
    side = paint("║", "cyan")
    print(f"{side}  {paint(text, 'bold')}  {side}")
    print(paint(f"╚{line}╝", "cyan"))
    print()


def success(text: str) -> None:
    print(f"{paint(ICONS['success'], 'green')} {text}")


def error(text: str) -> None:
    print(f"{paint(ICONS['error'], 'red')} {text}")


def warning(text: str) -> None:
    print(f"{paint(ICONS['warning'], 'yellow')} {text}")


def info(text: str) -> None:
    print(f"{paint(ICONS['info'], 'blue')} {text}")


def format_duration(ms: float) -> str:
    """Human readable duration: ``850ms``, ``2.5s`` or ``1m 5s``."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60_000:
        return f"{ms / 1000:.1f}s"
    minutes = int(ms // 60_000)
    seconds = int((ms % 60_000) // 1000)
    return f"{minutes}m {seconds}s"


class Spinner:
    """Start/stop status line; prints once on each transition."""

    def __init__(self, text: str):
        self.text = text
        self._started: Optional[float] = None

    def start(self) -> None:
        self._started = time.monotonic()
        print(f"{paint('○', 'cyan')} {self.text}...")

    def stop(self, success: bool = True) -> None:
        elapsed_ms = 0.0
        if self._started is not None:
            elapsed_ms = (time.monotonic() - self._started) * 1000
        duration = f" {paint('(' + format_duration(elapsed_ms) + ')', 'dim')}" if elapsed_ms > 1000 else ""
        icon = paint(ICONS["success"], "green") if success else paint(ICONS["error"], "red")
        print(f"{icon} {self.text}{duration}")

    def update(self, text: str) -> None:
        self.text = text
