"""
Application coordinator wiring the Qt backend to the alert stack manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtWidgets import QApplication

from alerts_core.alert_stack import AlertStackManager
from alerts_core.qt_backend import QtDisplayProvider, QtDrawingSurface, QtScheduler, QtTextMeasurer
from alerts_core.settings import AlertSettings, AlertSettingsManager
from screen_alerts.screen_alerts import logger as app_logger

APP_NAME = "Screen Alerts"
APP_VERSION = "1.0.0"
IDLE_POLL_INTERVAL_MS = 100


@dataclass
class AlertApplication(QObject):
    settings_manager: AlertSettingsManager = field(default_factory=AlertSettingsManager)
    settings: Optional[AlertSettings] = None

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        if self.settings is None:
            self.settings = self.settings_manager.read_settings()

        self.scheduler = QtScheduler(self)
        self.displays = QtDisplayProvider()
        self.manager = AlertStackManager(
            QtDrawingSurface(),
            QtTextMeasurer(),
            self.displays,
            self.scheduler,
            settings=self.settings,
        )

        self._idle_timer = QTimer(self)
        self._idle_timer.setInterval(IDLE_POLL_INTERVAL_MS)
        self._idle_timer.timeout.connect(self._check_idle)

    def run_until_idle(self) -> None:
        """Quit the Qt event loop once no alert is visible and every fade has finished."""
        self._logger.debug("Waiting for {} alert(s) to close.", len(self.manager))
        self._idle_timer.start()

    def shutdown(self, fade_seconds: Optional[float] = None) -> None:
        """
        Close every alert; the event loop ends once their fades finish.

        ``None`` uses the configured fade-out time.
        """
        self._logger.info("Closing all alerts and shutting down.")
        self.manager.close_all(fade_seconds)
        self._idle_timer.start()

    @property
    def idle(self) -> bool:
        return len(self.manager) == 0 and self.scheduler.pending_count() == 0

    def _check_idle(self) -> None:
        if not self.idle:
            return
        self._idle_timer.stop()
        self._logger.debug("All alerts closed; leaving the event loop.")
        app = QApplication.instance()
        if app is not None:
            app.quit()
