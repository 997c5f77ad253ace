import signal

import pytest

pytest.importorskip("PySide6")

from PySide6.QtTest import QTest  # noqa: E402

import alerts_core.app as app_module  # noqa: E402
import screen_alerts.main as main_module  # noqa: E402
from alerts_core.app import AlertApplication  # noqa: E402
from alerts_core.settings import AlertSettings  # noqa: E402


class FakeQtApp:
    def __init__(self) -> None:
        self.quit_calls = 0
        self.name = None

    def quit(self) -> None:
        self.quit_calls += 1

    def setApplicationName(self, name: str) -> None:  # noqa: N802
        self.name = name

    def exec(self) -> int:
        return 0


def fake_application_class(app: FakeQtApp) -> type:
    return type("FakeQApplication", (), {"instance": staticmethod(lambda: app)})


@pytest.fixture
def fake_app(qapp, monkeypatch):
    fake = FakeQtApp()
    monkeypatch.setattr(app_module, "QApplication", fake_application_class(fake))
    return fake


def make_application(fade_out: float = 0.01) -> AlertApplication:
    return AlertApplication(settings=AlertSettings(fade_in_seconds=0, fade_out_seconds=fade_out))


# ============================================================================
# idle quit
# ============================================================================


def test_quits_once_alerts_expire(fake_app):
    coordinator = make_application()
    coordinator.manager.show("bye", duration=0.01)

    coordinator.run_until_idle()
    assert not coordinator.idle
    QTest.qWait(400)

    assert coordinator.idle
    assert fake_app.quit_calls == 1


def test_persistent_alert_keeps_loop_running(fake_app):
    coordinator = make_application()
    coordinator.manager.show("stay", duration=None)

    coordinator.run_until_idle()
    QTest.qWait(250)
    assert fake_app.quit_calls == 0

    coordinator.shutdown()
    QTest.qWait(300)
    assert fake_app.quit_calls == 1


# ============================================================================
# shutdown
# ============================================================================


def test_shutdown_uses_configured_fade(fake_app):
    coordinator = make_application(fade_out=0.3)
    coordinator.manager.show("stay", duration=None)

    coordinator.shutdown()

    assert len(coordinator.manager) == 0
    assert coordinator.scheduler.pending_count() == 1
    QTest.qWait(150)
    assert fake_app.quit_calls == 0
    QTest.qWait(500)
    assert fake_app.quit_calls == 1


def test_shutdown_with_zero_fade_releases_now(fake_app):
    coordinator = make_application(fade_out=0.3)
    coordinator.manager.show("stay", duration=None)

    coordinator.shutdown(0)

    assert coordinator.idle
    QTest.qWait(250)
    assert fake_app.quit_calls == 1


# ============================================================================
# command line entry point
# ============================================================================


def test_main_rejects_unknown_screen(qapp, tmp_path):
    code = main_module.main(["Hi", "--screen", "99", "--config", str(tmp_path / "missing.json")])

    assert code == 2


@pytest.fixture
def interrupted(fake_app, monkeypatch):
    """Records SIGINT handlers installed by ``main`` and the fades passed to shutdown."""
    monkeypatch.setattr(main_module, "QApplication", fake_application_class(fake_app))
    handlers = {}
    monkeypatch.setattr(main_module.signal, "signal", lambda sig, handler: handlers.__setitem__(sig, handler))
    fades = []
    original_shutdown = AlertApplication.shutdown

    def _shutdown(self, fade_seconds=None):
        fades.append(fade_seconds)
        original_shutdown(self, fade_seconds)

    monkeypatch.setattr(AlertApplication, "shutdown", _shutdown)
    return handlers, fades


def test_main_interrupt_passes_requested_fade(fake_app, interrupted, tmp_path):
    handlers, fades = interrupted

    code = main_module.main(["Hi", "--persistent", "--fade", "0.05", "--config", str(tmp_path / "missing.json")])
    assert code == 0
    assert fake_app.name == app_module.APP_NAME

    handlers[signal.SIGINT](signal.SIGINT, None)
    assert fades == [0.05]
    QTest.qWait(300)
    assert fake_app.quit_calls == 1


def test_main_interrupt_without_fade_defers_to_settings(fake_app, interrupted, tmp_path):
    handlers, fades = interrupted

    main_module.main(["Hi", "--persistent", "--config", str(tmp_path / "missing.json")])
    handlers[signal.SIGINT](signal.SIGINT, None)

    assert fades == [None]
    QTest.qWait(500)
    assert fake_app.quit_calls == 1
