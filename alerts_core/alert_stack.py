"""
Alert stack manager: shows transient on-screen alerts that stack downward on
each display and fade out when they expire or are closed.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from alerts_core import layout
from alerts_core.alert_id import new_alert_id
from alerts_core.interfaces import (
    DisplayProvider,
    Drawing,
    DrawingSurface,
    IdFactory,
    Message,
    Scheduler,
    TextMeasurer,
    TimerHandle,
)
from alerts_core.settings import AlertSettings
from alerts_shared.alert_style import DEFAULT_STYLE, AlertStyle, ColorValueError
from alerts_shared.geometry import Display, Frame
from alerts_shared.styled_text import StyledText
from screen_alerts.screen_alerts import logger as app_logger

_LOGGER = app_logger.get_logger()

_UNSET: Any = object()
_MAX_ID_ATTEMPTS = 10


class AlertUsageError(TypeError):
    """Raised when :meth:`AlertStackManager.show` receives an argument it cannot place."""


class AlertState(Enum):
    VISIBLE = "Visible"
    CLOSING = "Closing"
    GONE = "Gone"


@dataclass
class VisibleAlert:
    identifier: str
    display: Display
    frame: Frame
    drawings: List[Drawing] = field(default_factory=list)
    timer: Optional[TimerHandle] = None
    state: AlertState = AlertState.VISIBLE

    @property
    def persistent(self) -> bool:
        return self.timer is None


class AlertStackManager:
    """
    Tracks visible alerts and places new ones below the newest alert on the
    same display.

    All methods run on the host's event loop; timer and fade callbacks are
    delivered through the scheduler on that same loop.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        measurer: TextMeasurer,
        displays: DisplayProvider,
        scheduler: Scheduler,
        *,
        id_factory: IdFactory = new_alert_id,
        default_style: Optional[AlertStyle] = None,
        settings: Optional[AlertSettings] = None,
    ) -> None:
        self._surface = surface
        self._measurer = measurer
        self._displays = displays
        self._scheduler = scheduler
        self._id_factory = id_factory
        self._settings = settings or AlertSettings()
        self._default_style = (default_style or DEFAULT_STYLE).merged(self._settings.style_overrides)
        self._alerts: List[VisibleAlert] = []

    def __call__(self, message: Any, *args: Any, **kwargs: Any) -> str:
        return self.show(message, *args, **kwargs)

    def __len__(self) -> int:
        return len(self._alerts)

    @property
    def visible_alerts(self) -> Tuple[VisibleAlert, ...]:
        """Snapshot of tracked alerts, oldest first."""
        return tuple(self._alerts)

    def is_visible(self, identifier: str) -> bool:
        return self._find(identifier) is not None

    @property
    def default_style(self) -> AlertStyle:
        return self._default_style

    def set_default_style(self, style: AlertStyle | Mapping[str, Any]) -> AlertStyle:
        """Replace the default style (or merge overrides into it); returns the previous one."""
        previous = self._default_style
        self._default_style = previous.merged(style)
        return previous

    def show(
        self,
        message: Any,
        *args: Any,
        style: Any = _UNSET,
        display: Any = _UNSET,
        duration: Any = _UNSET,
    ) -> str:
        """
        Show ``message`` and return the alert's identifier.

        Optional positional arguments are assigned in order: a mapping or
        :class:`AlertStyle` becomes the style, a :class:`Display` becomes the
        display, and any other value becomes the duration, each only while
        that slot is still empty. ``None`` positionals are skipped.

        A numeric duration closes the alert after that many seconds. Any
        other explicit duration (``None``, a string...) keeps the alert until
        :meth:`close_specific` or :meth:`close_all` is called.
        """
        style, display, duration = _parse_optional_args(args, style, display, duration)
        if not isinstance(message, StyledText):
            message = str(message)
        if display is _UNSET or display is None:
            display = self._displays.focused_display()
        if duration is _UNSET:
            duration = self._settings.default_duration
        return self._show_alert(message, None if style is _UNSET else style, display, _as_seconds(duration))

    def close_specific(self, identifier: str, fade_seconds: Optional[float] = None) -> None:
        """Close one alert; unknown identifiers are ignored."""
        fade = self._resolve_fade(fade_seconds)
        entry = self._find(identifier)
        if entry is None:
            _LOGGER.debug("Alert {} is not visible; nothing to close.", identifier)
            return
        self._alerts.remove(entry)
        entry.state = AlertState.CLOSING
        if entry.timer is not None:
            entry.timer.cancel()
            entry.timer = None

        drawings, entry.drawings = entry.drawings, []
        for drawing in drawings:
            drawing.hide(fade)
        _LOGGER.debug("Closing alert {} with a {}s fade.", identifier, fade)
        if fade > 0:
            self._scheduler.do_after(fade, lambda: _release(entry, drawings))
        else:
            _release(entry, drawings)

    def close_all(self, fade_seconds: Optional[float] = None) -> None:
        """Close every visible alert, newest first."""
        fade = self._resolve_fade(fade_seconds)
        while self._alerts:
            self.close_specific(self._alerts[-1].identifier, fade)

    def _show_alert(self, message: Message, style: Any, display: Display, duration: Optional[float]) -> str:
        resolved = self._default_style.merged(style)
        font_name, font_size, text_color = resolved.text_font, resolved.text_size, resolved.text_color

        if resolved.text_style is not None and not isinstance(message, StyledText):
            message = self._styled(message, resolved)
        if isinstance(message, StyledText):
            font_name, font_size, text_color = message.font_name, message.font_size, message.color

        screen_frame = display.frame
        top = layout.stacked_top(screen_frame, self._latest_frame_on(display))
        measured = self._measurer.measure(message, font_name=font_name, font_size=font_size)
        frame, text_frame = layout.alert_frames(screen_frame, top, measured, font_size)

        fade_in = self._settings.fade_in_seconds
        background = self._surface.rectangle(
            frame,
            stroke_width=resolved.stroke_width,
            stroke_color=resolved.stroke_color,
            fill_color=resolved.fill_color,
            radius=resolved.radius,
        )
        background.show(fade_in)
        text = self._surface.text(text_frame, message, font_name=font_name, font_size=font_size, color=text_color)
        text.order_above(background)
        text.show(fade_in)

        identifier = self._new_identifier()
        entry = VisibleAlert(identifier=identifier, display=display, frame=frame, drawings=[background, text])
        if duration is not None:
            # Only track the alert once its expiry timer exists.
            try:
                entry.timer = self._scheduler.do_after(duration, lambda: self._expire(identifier))
            except Exception:
                _LOGGER.exception("Could not schedule expiry for alert {}; discarding it.", identifier)
                for drawing in entry.drawings:
                    drawing.hide(0)
                    drawing.delete()
                raise
        self._alerts.append(entry)

        _LOGGER.debug(
            "Showing alert {} on display {} at {} ({}).",
            identifier,
            display.name,
            frame,
            "persistent" if duration is None else f"{duration}s",
        )
        return identifier

    def _styled(self, message: str, style: AlertStyle) -> StyledText:
        text_style = dict(style.text_style or {})
        fallbacks = dict(
            fallback_font=style.text_font,
            fallback_size=style.text_size,
            fallback_color=style.text_color,
        )
        try:
            return StyledText.from_text_style(message, text_style, **fallbacks)
        except ColorValueError as exc:
            _LOGGER.warning("Ignoring invalid text_style color: {}", exc)
            text_style.pop("color", None)
            return StyledText.from_text_style(message, text_style, **fallbacks)

    def _expire(self, identifier: str) -> None:
        entry = self._find(identifier)
        if entry is None:
            return
        entry.timer = None
        self.close_specific(identifier, self._settings.fade_out_seconds)

    def _latest_frame_on(self, display: Display) -> Optional[Frame]:
        for entry in reversed(self._alerts):
            if display.same_as(entry.display):
                return entry.frame
        return None

    def _find(self, identifier: str) -> Optional[VisibleAlert]:
        for entry in self._alerts:
            if entry.identifier == identifier:
                return entry
        return None

    def _new_identifier(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            identifier = self._id_factory()
            if self._find(identifier) is None:
                return identifier
        raise RuntimeError("Identifier factory keeps returning identifiers of visible alerts.")

    def _resolve_fade(self, fade_seconds: Any) -> float:
        if fade_seconds is None:
            return self._settings.fade_out_seconds
        if isinstance(fade_seconds, bool) or not isinstance(fade_seconds, numbers.Real):
            _LOGGER.warning("Ignoring non-numeric fade {!r}; using the default.", fade_seconds)
            return self._settings.fade_out_seconds
        return max(0.0, float(fade_seconds))


def _parse_optional_args(args: Tuple[Any, ...], style: Any, display: Any, duration: Any) -> Tuple[Any, Any, Any]:
    parsed = {"style": _UNSET, "display": _UNSET, "duration": _UNSET}
    # The message is argument 1.
    for position, value in enumerate(args, start=2):
        if value is None:
            continue
        if isinstance(value, (Mapping, AlertStyle)) and parsed["style"] is _UNSET:
            parsed["style"] = value
        elif isinstance(value, Display) and parsed["display"] is _UNSET:
            parsed["display"] = value
        elif parsed["duration"] is _UNSET:
            parsed["duration"] = value
        else:
            raise AlertUsageError(f"unexpected type {type(value).__name__} found for argument {position}")

    for name, value in (("style", style), ("display", display), ("duration", duration)):
        if value is _UNSET:
            continue
        if parsed[name] is not _UNSET:
            raise AlertUsageError(f"{name} given both positionally and by keyword")
        parsed[name] = value
    return parsed["style"], parsed["display"], parsed["duration"]


def _as_seconds(duration: Any) -> Optional[float]:
    """Numeric durations are clamped to >= 0; anything else means persistent."""
    if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
        return None
    return max(0.0, float(duration))


def _release(entry: VisibleAlert, drawings: List[Drawing]) -> None:
    for drawing in drawings:
        drawing.delete()
    entry.state = AlertState.GONE
