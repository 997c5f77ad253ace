"""
Host facilities consumed by the alert stack manager.

The Qt backend in :mod:`alerts_core.qt_backend` implements these; tests use
in-memory fakes.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, Union

from alerts_shared.alert_style import Color
from alerts_shared.geometry import Display, Frame, Size
from alerts_shared.styled_text import StyledText

Message = Union[str, StyledText]


class Drawing(Protocol):
    def show(self, fade_seconds: float = 0.0) -> "Drawing":
        ...

    def hide(self, fade_seconds: float = 0.0) -> "Drawing":
        ...

    def order_above(self, other: "Drawing") -> "Drawing":
        ...

    def delete(self) -> None:
        ...


class DrawingSurface(Protocol):
    def rectangle(
        self,
        frame: Frame,
        *,
        stroke_width: float,
        stroke_color: Color,
        fill_color: Color,
        radius: float,
    ) -> Drawing:
        ...

    def text(
        self,
        frame: Frame,
        message: Message,
        *,
        font_name: str,
        font_size: float,
        color: Color,
    ) -> Drawing:
        ...


class TextMeasurer(Protocol):
    def measure(self, message: Message, *, font_name: str, font_size: float) -> Size:
        ...


class DisplayProvider(Protocol):
    def displays(self) -> Sequence[Display]:
        ...

    def focused_display(self) -> Display:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Stop the callback from running. Safe to call more than once."""

    @property
    def active(self) -> bool:
        ...


class Scheduler(Protocol):
    def do_after(self, seconds: float, callback: Callable[[], None]) -> TimerHandle:
        ...


IdFactory = Callable[[], str]
