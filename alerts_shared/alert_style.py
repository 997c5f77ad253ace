"""
Visual style records for on-screen alerts.

An :class:`AlertStyle` is resolved once per alert by merging per-call
overrides over the manager's default style. Merging never raises: unknown
keys are ignored and values that cannot be coerced keep the base value.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from screen_alerts.screen_alerts import logger as app_logger

_LOGGER = app_logger.get_logger()


class ColorValueError(ValueError):
    """Raised when a value cannot be interpreted as a color."""


def _clamp_channel(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ColorValueError(f"Color channel must be a number, got {type(value).__name__}")
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True, slots=True)
class Color:
    """RGBA color with float channels in ``[0, 1]``."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 1.0

    @classmethod
    def white(cls, white: float, alpha: float = 1.0) -> "Color":
        level = _clamp_channel(white)
        return cls(level, level, level, _clamp_channel(alpha))

    @classmethod
    def from_value(cls, value: Any) -> "Color":
        """
        Build a color from another color, a channel mapping, or a hex string.

        Mappings use either ``white`` (grayscale) or ``red``/``green``/``blue``
        keys, each with an optional ``alpha``. Hex strings are ``#RRGGBB`` or
        ``#RRGGBBAA``.
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, Mapping):
            alpha = _clamp_channel(value.get("alpha", 1.0))
            if "white" in value:
                return cls.white(value["white"], alpha)
            return cls(
                _clamp_channel(value.get("red", 0.0)),
                _clamp_channel(value.get("green", 0.0)),
                _clamp_channel(value.get("blue", 0.0)),
                alpha,
            )
        if isinstance(value, str):
            return cls._from_hex(value)
        raise ColorValueError(f"Unsupported color value of type {type(value).__name__}")

    @classmethod
    def _from_hex(cls, value: str) -> "Color":
        digits = value.strip().lstrip("#")
        if len(digits) not in (6, 8):
            raise ColorValueError(f"Hex color must have 6 or 8 digits: {value!r}")
        try:
            channels = [int(digits[i : i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
        except ValueError as exc:
            raise ColorValueError(f"Invalid hex color: {value!r}") from exc
        if len(channels) == 3:
            channels.append(1.0)
        return cls(*channels)


# camelCase spellings accepted alongside the field names.
_KEY_ALIASES = {
    "strokeWidth": "stroke_width",
    "strokeColor": "stroke_color",
    "fillColor": "fill_color",
    "textColor": "text_color",
    "textFont": "text_font",
    "textSize": "text_size",
    "textStyle": "text_style",
}

_COLOR_FIELDS = {"stroke_color", "fill_color", "text_color"}
_NUMBER_FIELDS = {"stroke_width", "text_size", "radius"}


@dataclass(frozen=True)
class AlertStyle:
    stroke_width: float = 2
    stroke_color: Color = Color.white(1, 1)
    fill_color: Color = Color.white(0, 0.75)
    text_color: Color = Color.white(1, 1)
    text_font: str = ".AppleSystemUIFont"
    text_size: float = 27
    radius: float = 27
    text_style: Optional[Mapping[str, Any]] = None

    def merged(self, overrides: "AlertStyle | Mapping[str, Any] | None") -> "AlertStyle":
        """Return a copy with ``overrides`` applied key-by-key."""
        if overrides is None:
            return self
        if isinstance(overrides, AlertStyle):
            return overrides
        if not isinstance(overrides, Mapping):
            _LOGGER.warning("Ignoring style overrides of type {}", type(overrides).__name__)
            return self

        known = {f.name for f in fields(self)}
        changes: Dict[str, Any] = {}
        for raw_key, value in overrides.items():
            key = _KEY_ALIASES.get(raw_key, raw_key)
            if key not in known:
                _LOGGER.debug("Ignoring unknown style key {!r}", raw_key)
                continue
            try:
                changes[key] = _coerce(key, value)
            except (ColorValueError, TypeError, ValueError) as exc:
                _LOGGER.warning("Ignoring invalid value for style key {!r}: {}", raw_key, exc)
        return replace(self, **changes) if changes else self


def _coerce(key: str, value: Any) -> Any:
    if key in _COLOR_FIELDS:
        return Color.from_value(value)
    if key in _NUMBER_FIELDS:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"expected a number, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"must not be negative, got {value}")
        return value
    if key == "text_font":
        if not isinstance(value, str) or not value.strip():
            raise TypeError("expected a non-empty font name")
        return value
    if key == "text_style":
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise TypeError(f"expected a mapping, got {type(value).__name__}")
        return dict(value)
    return value


DEFAULT_STYLE = AlertStyle()
