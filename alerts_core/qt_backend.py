"""
PySide6 implementations of the host facilities used by the alert stack.

Each drawing is its own frameless, translucent, click-through top-level
window so alerts can float above every application on any screen.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QEasingCurve, QObject, QPropertyAnimation, QRectF, Qt, QTimer
from PySide6.QtGui import QColor, QCursor, QFont, QFontMetrics, QGuiApplication, QPainter, QPen, QScreen
from PySide6.QtWidgets import QApplication, QWidget

from alerts_core.interfaces import Message
from alerts_shared.alert_style import Color
from alerts_shared.geometry import Display, Frame, Size
from alerts_shared.styled_text import StyledText
from screen_alerts.screen_alerts import logger as app_logger

_LOGGER = app_logger.get_logger()


def to_qcolor(color: Color) -> QColor:
    return QColor.fromRgbF(color.red, color.green, color.blue, color.alpha)


def make_font(message: Message, font_name: str, font_size: float) -> QFont:
    """Font for ``message``; a StyledText message brings its own font."""
    if isinstance(message, StyledText):
        font = QFont(message.font_name)
        font.setPointSizeF(float(message.font_size))
        font.setBold(message.has("bold"))
        font.setItalic(message.has("italic"))
        font.setUnderline(message.has("underline"))
        font.setStrikeOut(message.has("strikethrough"))
        return font
    font = QFont(font_name)
    font.setPointSizeF(float(font_size))
    return font


class _OverlayWindow(QWidget):
    def __init__(self, frame: Frame) -> None:
        super().__init__(None)
        flags = (
            Qt.WindowType.Tool
            | Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.WindowTransparentForInput
        )
        self.setWindowFlags(flags)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        # macOS: keep the tool window visible while our app is in the background.
        self.setAttribute(Qt.WidgetAttribute.WA_MacAlwaysShowToolWindow, True)
        self.setGeometry(
            math.floor(frame.x),
            math.floor(frame.y),
            max(1, math.ceil(frame.w)),
            max(1, math.ceil(frame.h)),
        )


class RectangleWindow(_OverlayWindow):
    def __init__(self, frame: Frame, *, stroke_width: float, stroke_color: Color, fill_color: Color, radius: float) -> None:
        super().__init__(frame)
        self._stroke_width = stroke_width
        self._stroke_color = to_qcolor(stroke_color)
        self._fill_color = to_qcolor(fill_color)
        self._radius = radius

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        inset = self._stroke_width / 2
        rect = QRectF(self.rect()).adjusted(inset, inset, -inset, -inset)
        painter.setBrush(self._fill_color)
        if self._stroke_width > 0:
            pen = QPen(self._stroke_color)
            pen.setWidthF(float(self._stroke_width))
            painter.setPen(pen)
        else:
            painter.setPen(Qt.PenStyle.NoPen)
        painter.drawRoundedRect(rect, self._radius, self._radius)
        painter.end()


class TextWindow(_OverlayWindow):
    def __init__(self, frame: Frame, message: Message, *, font_name: str, font_size: float, color: Color) -> None:
        super().__init__(frame)
        self._lines = str(message).splitlines() or [""]
        self._font = make_font(message, font_name, font_size)
        self._color = to_qcolor(message.color if isinstance(message, StyledText) else color)

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
        painter.setFont(self._font)
        painter.setPen(self._color)
        metrics = painter.fontMetrics()
        baseline = metrics.ascent()
        for line in self._lines:
            painter.drawText(0, baseline, line)
            baseline += metrics.lineSpacing()
        painter.end()


class QtDrawing:
    """Drawing handle that fades its window in and out."""

    def __init__(self, window: QWidget) -> None:
        self._window = window
        self._above: Optional[QtDrawing] = None
        self._animation: Optional[QPropertyAnimation] = None
        self._deleted = False

    @property
    def window(self) -> QWidget:
        return self._window

    @property
    def deleted(self) -> bool:
        return self._deleted

    def show(self, fade_seconds: float = 0.0) -> "QtDrawing":
        if self._deleted:
            return self
        if fade_seconds > 0:
            self._window.setWindowOpacity(0.0)
            self._window.show()
            self._animate(1.0, fade_seconds)
        else:
            self._stop_animation()
            self._window.setWindowOpacity(1.0)
            self._window.show()
        if self._above is not None:
            self._window.raise_()
        return self

    def hide(self, fade_seconds: float = 0.0) -> "QtDrawing":
        if self._deleted:
            return self
        if fade_seconds > 0 and self._window.isVisible():
            self._animate(0.0, fade_seconds, on_finished=self._window.hide)
        else:
            self._stop_animation()
            self._window.hide()
        return self

    def order_above(self, other: "QtDrawing") -> "QtDrawing":
        self._above = other
        if self._window.isVisible():
            self._window.raise_()
        return self

    def delete(self) -> None:
        if self._deleted:
            return
        self._deleted = True
        self._stop_animation()
        self._window.close()
        self._window.deleteLater()

    def _animate(self, target: float, seconds: float, on_finished: Optional[Callable[[], None]] = None) -> None:
        self._stop_animation()
        animation = QPropertyAnimation(self._window, b"windowOpacity", self._window)
        animation.setDuration(max(1, int(seconds * 1000)))
        animation.setStartValue(self._window.windowOpacity())
        animation.setEndValue(target)
        animation.setEasingCurve(QEasingCurve.Type.InOutQuad)
        if on_finished is not None:
            animation.finished.connect(on_finished)
        self._animation = animation
        animation.start()

    def _stop_animation(self) -> None:
        if self._animation is not None:
            self._animation.stop()
            self._animation = None


class QtDrawingSurface:
    def rectangle(
        self,
        frame: Frame,
        *,
        stroke_width: float,
        stroke_color: Color,
        fill_color: Color,
        radius: float,
    ) -> QtDrawing:
        window = RectangleWindow(
            frame,
            stroke_width=stroke_width,
            stroke_color=stroke_color,
            fill_color=fill_color,
            radius=radius,
        )
        return QtDrawing(window)

    def text(self, frame: Frame, message: Message, *, font_name: str, font_size: float, color: Color) -> QtDrawing:
        return QtDrawing(TextWindow(frame, message, font_name=font_name, font_size=font_size, color=color))


class QtTextMeasurer:
    def measure(self, message: Message, *, font_name: str, font_size: float) -> Size:
        metrics = QFontMetrics(make_font(message, font_name, font_size))
        lines = str(message).splitlines() or [""]
        width = max(metrics.horizontalAdvance(line) for line in lines)
        height = metrics.height() + metrics.lineSpacing() * (len(lines) - 1)
        return Size(w=width, h=height)


def _display_for(screen: QScreen) -> Display:
    geometry = screen.geometry()
    return Display(
        identifier=screen.serialNumber() or screen.name(),
        name=screen.name(),
        frame=Frame(geometry.x(), geometry.y(), geometry.width(), geometry.height()),
    )


class QtDisplayProvider:
    """Enumerates ``QScreen`` objects as displays."""

    def displays(self) -> Sequence[Display]:
        return [_display_for(screen) for screen in QGuiApplication.screens()]

    def focused_display(self) -> Display:
        screen = self._focused_screen()
        if screen is None:
            raise RuntimeError("No screens are available to show alerts on.")
        return _display_for(screen)

    def _focused_screen(self) -> Optional[QScreen]:
        window = QApplication.activeWindow()
        if window is not None and window.screen() is not None:
            return window.screen()
        screen = QGuiApplication.screenAt(QCursor.pos())
        if screen is not None:
            return screen
        return QGuiApplication.primaryScreen()


# QTimer intervals are signed 32-bit milliseconds (about 24.8 days).
MAX_TIMER_INTERVAL_MS = 2**31 - 1


def _interval_ms(seconds: float) -> int:
    if math.isnan(seconds) or seconds <= 0:
        return 0
    if seconds * 1000 >= MAX_TIMER_INTERVAL_MS:
        return MAX_TIMER_INTERVAL_MS
    return int(seconds * 1000)


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._timer.interval() if self._timer is not None else 0

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _fired(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """Single-shot deferred callbacks on the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._pending: List[QtTimerHandle] = []

    def do_after(self, seconds: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(_interval_ms(seconds))
        handle = QtTimerHandle(timer)
        self._pending.append(handle)

        def _run() -> None:
            handle._fired()
            self._forget(handle)
            try:
                callback()
            except Exception:  # pragma: no cover - keep the event loop alive
                _LOGGER.exception("Deferred callback failed.")

        timer.timeout.connect(_run)
        timer.start()
        return handle

    def pending_count(self) -> int:
        self._pending = [handle for handle in self._pending if handle.active]
        return len(self._pending)

    def _forget(self, handle: QtTimerHandle) -> None:
        if handle in self._pending:
            self._pending.remove(handle)
