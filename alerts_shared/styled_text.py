"""
Rich-text messages for alerts.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any, Mapping

from .alert_style import Color

SUPPORTED_ATTRIBUTES = ("bold", "italic", "underline", "strikethrough")


@dataclass(frozen=True)
class StyledText:
    """
    Text with explicit font, size and color.

    Alerts never restyle a ``StyledText`` message: its own formatting wins
    over the alert style's text settings.
    """

    text: str
    font_name: str
    font_size: float
    color: Color
    attributes: Mapping[str, bool] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.text

    def has(self, attribute: str) -> bool:
        return bool(self.attributes.get(attribute, False))

    @classmethod
    def from_text_style(
        cls,
        text: str,
        text_style: Mapping[str, Any],
        *,
        fallback_font: str,
        fallback_size: float,
        fallback_color: Color,
    ) -> "StyledText":
        """
        Convert plain text using a ``text_style`` mapping.

        ``font`` may be a font name or a ``{"name": ..., "size": ...}``
        mapping; missing parts fall back to the alert style's values, as does
        a missing ``color``.
        """
        font_name, font_size = _resolve_font(text_style.get("font"), fallback_font, fallback_size)
        raw_color = text_style.get("color")
        color = fallback_color if raw_color is None else Color.from_value(raw_color)
        attributes = {name: bool(text_style[name]) for name in SUPPORTED_ATTRIBUTES if name in text_style}
        return cls(text=text, font_name=font_name, font_size=font_size, color=color, attributes=attributes)


def _resolve_font(raw: Any, fallback_font: str, fallback_size: float) -> tuple[str, float]:
    if isinstance(raw, str) and raw.strip():
        return raw, fallback_size
    if isinstance(raw, Mapping):
        name = raw.get("name")
        size = raw.get("size")
        if not isinstance(name, str) or not name.strip():
            name = fallback_font
        if isinstance(size, bool) or not isinstance(size, numbers.Real) or size <= 0:
            size = fallback_size
        return name, size
    return fallback_font, fallback_size
