from __future__ import annotations

from enum import Enum

from docuextract.core.logging import get_logger
from docuextract.domain.ports.state_port import StatePort

THEME_KEY = "theme"

_logger = get_logger(__name__)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


def load_theme(state: StatePort, default: Theme = Theme.LIGHT) -> Theme:
    """Stored theme, or ``default`` when it is missing or unreadable."""
    try:
        raw = state.read_json(THEME_KEY)
    except (OSError, ValueError) as exc:
        _logger.warning("theme_load_failed", extra={"error": str(exc)})
        return default
    if raw is None:
        return default
    try:
        return Theme(raw)
    except ValueError:
        _logger.warning("theme_value_unknown", extra={"value": repr(raw)[:50]})
        return default


def save_theme(state: StatePort, theme: Theme) -> None:
    state.write_json(THEME_KEY, theme.value)
