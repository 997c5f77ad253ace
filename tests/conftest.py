from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import pytest

# Qt tests render without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from alerts_core.alert_stack import AlertStackManager
from alerts_core.settings import AlertSettings
from alerts_shared.geometry import Display, Frame, Size

MAIN_DISPLAY = Display(identifier="main", name="Built-in", frame=Frame(0, 0, 1920, 1080))
SIDE_DISPLAY = Display(identifier="side", name="External", frame=Frame(1920, 0, 1280, 720))

TEXT_HEIGHT = 32
CHAR_WIDTH = 10


@dataclass
class FakeDrawing:
    kind: str
    frame: Frame
    options: dict
    message: Any = None
    events: List[Tuple[str, float]] = field(default_factory=list)
    above: Optional["FakeDrawing"] = None
    deleted: bool = False

    def show(self, fade_seconds: float = 0.0) -> "FakeDrawing":
        self.events.append(("show", fade_seconds))
        return self

    def hide(self, fade_seconds: float = 0.0) -> "FakeDrawing":
        self.events.append(("hide", fade_seconds))
        return self

    def order_above(self, other: "FakeDrawing") -> "FakeDrawing":
        self.above = other
        return self

    def delete(self) -> None:
        assert not self.deleted, "drawing deleted twice"
        self.deleted = True


class FakeSurface:
    def __init__(self) -> None:
        self.drawings: List[FakeDrawing] = []

    def rectangle(self, frame: Frame, **options) -> FakeDrawing:
        drawing = FakeDrawing("rectangle", frame, options)
        self.drawings.append(drawing)
        return drawing

    def text(self, frame: Frame, message, **options) -> FakeDrawing:
        drawing = FakeDrawing("text", frame, options, message=message)
        self.drawings.append(drawing)
        return drawing

    def of_kind(self, kind: str) -> List[FakeDrawing]:
        return [d for d in self.drawings if d.kind == kind]


class FakeMeasurer:
    """Every character is CHAR_WIDTH wide; every message is TEXT_HEIGHT tall."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, str, float]] = []

    def measure(self, message, *, font_name: str, font_size: float) -> Size:
        self.calls.append((message, font_name, font_size))
        return Size(w=len(str(message)) * CHAR_WIDTH, h=TEXT_HEIGHT)


class FakeDisplays:
    def __init__(self) -> None:
        self.all = [MAIN_DISPLAY, SIDE_DISPLAY]
        self.focused = MAIN_DISPLAY

    def displays(self):
        return list(self.all)

    def focused_display(self) -> Display:
        return self.focused


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self.cancel_calls = 0

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancel_calls += 1
        self.cancelled = True


class FakeScheduler:
    """Deferred callbacks driven by a manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def do_after(self, seconds: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + seconds, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if t.active and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if t.active]


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def measurer() -> FakeMeasurer:
    return FakeMeasurer()


@pytest.fixture
def displays() -> FakeDisplays:
    return FakeDisplays()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def make_manager(surface, measurer, displays, scheduler):
    def _make(**kwargs) -> AlertStackManager:
        kwargs.setdefault("settings", AlertSettings())
        return AlertStackManager(surface, measurer, displays, scheduler, **kwargs)

    return _make


@pytest.fixture
def manager(make_manager) -> AlertStackManager:
    return make_manager()


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PySide6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app
