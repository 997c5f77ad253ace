from pathlib import Path

import pytest

pytest.importorskip("PySide6")

from screen_alerts.main import parse_args, show_kwargs  # noqa: E402


def test_defaults():
    args = parse_args(["Hello"])

    assert args.message == "Hello"
    assert args.duration is None
    assert args.persistent is False
    assert args.screen is None
    assert show_kwargs(args) == {}


def test_duration_and_style():
    args = parse_args(["Hi", "--duration", "3.5", "--style-json", '{"radius": 4}', "--screen", "1"])

    assert args.screen == 1
    assert show_kwargs(args) == {"duration": 3.5, "style": {"radius": 4}}


def test_persistent_maps_to_none_duration():
    args = parse_args(["Hi", "--persistent"])

    assert show_kwargs(args) == {"duration": None}


def test_duration_and_persistent_are_exclusive():
    with pytest.raises(SystemExit):
        parse_args(["Hi", "--persistent", "--duration", "2"])


@pytest.mark.parametrize(
    "argv",
    [
        ["Hi", "--duration", "-1"],
        ["Hi", "--duration", "soon"],
        ["Hi", "--style-json", "[1]"],
        ["Hi", "--style-json", "{bad"],
    ],
)
def test_invalid_options_exit(argv):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(argv)

    assert excinfo.value.code == 2


def test_paths():
    args = parse_args(["Hi", "--config", "/tmp/a.json", "--log-file", "/tmp/a.log", "--fade", "0.5"])

    assert args.config == Path("/tmp/a.json")
    assert args.log_file == Path("/tmp/a.log")
    assert args.fade == 0.5
