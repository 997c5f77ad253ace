"""
Entry point for the screen-alerts command line tool.
"""

from __future__ import annotations

import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from PySide6.QtWidgets import QApplication

from alerts_core.app import APP_NAME, APP_VERSION, AlertApplication
from alerts_core.settings import AlertSettingsManager
from screen_alerts.screen_alerts import logger as app_logger

_LOGGER = app_logger.get_logger()


def _json_object(value: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("style must be a JSON object")
    return parsed


def _non_negative(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if seconds < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screen-alerts",
        description="Show a transient on-screen alert.",
    )
    parser.add_argument("message", help="text to display")
    timing = parser.add_mutually_exclusive_group()
    timing.add_argument("--duration", type=_non_negative, help="seconds before the alert fades (default from settings)")
    timing.add_argument("--persistent", action="store_true", help="keep the alert until interrupted")
    parser.add_argument("--screen", type=int, help="index of the screen to use (default: focused screen)")
    parser.add_argument("--style-json", type=_json_object, default=None, help="style overrides as a JSON object")
    parser.add_argument("--fade", type=_non_negative, default=None, help="fade-out seconds when interrupted (default from settings)")
    parser.add_argument("--config", type=Path, default=None, help="settings file (default: ~/.config/screen-alerts/settings.json)")
    parser.add_argument("--log-file", type=Path, default=None, help="log file path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def show_kwargs(args: argparse.Namespace) -> Dict[str, Any]:
    """Keyword arguments for ``AlertStackManager.show`` derived from the CLI options."""
    kwargs: Dict[str, Any] = {}
    if args.style_json:
        kwargs["style"] = args.style_json
    if args.persistent:
        kwargs["duration"] = None
    elif args.duration is not None:
        kwargs["duration"] = args.duration
    return kwargs


def main(argv: Optional[List[str]] = None) -> int:
    """Show one alert and run the Qt event loop until it is gone."""
    args = parse_args(argv)
    if args.log_file is not None:
        app_logger.configure(args.log_file, force=True)

    qt_app = QApplication.instance() or QApplication(sys.argv[:1])
    qt_app.setApplicationName(APP_NAME)
    coordinator = AlertApplication(settings_manager=AlertSettingsManager(args.config))

    kwargs = show_kwargs(args)
    if args.screen is not None:
        displays = coordinator.displays.displays()
        if not 0 <= args.screen < len(displays):
            _LOGGER.error("Screen index {} is out of range (found {} screen(s)).", args.screen, len(displays))
            return 2
        kwargs["display"] = displays[args.screen]

    identifier = coordinator.manager.show(args.message, **kwargs)
    _LOGGER.info("Showing alert {}", identifier)

    # Ctrl+C closes alerts with the requested fade instead of killing the loop.
    signal.signal(signal.SIGINT, lambda *_: coordinator.shutdown(args.fade))
    coordinator.run_until_idle()
    return qt_app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
