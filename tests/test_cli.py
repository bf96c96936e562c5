from pathlib import Path

import pytest

from pocpen.cli import parse_args


def test_defaults_are_none():
    args = parse_args([])
    assert args.config is None
    assert args.creature is None


@pytest.mark.parametrize("flag", ["-c", "--config"])
def test_config_path(flag):
    args = parse_args([flag, "my.toml"])
    assert args.config == Path("my.toml")


@pytest.mark.parametrize("flag", ["-n", "--creature"])
def test_creature_override(flag):
    args = parse_args([flag, "eevee"])
    assert args.creature == "eevee"
    assert args.config is None


def test_both_options():
    args = parse_args(["-c", "a.toml", "-n", "pikachu"])
    assert (args.config, args.creature) == (Path("a.toml"), "pikachu")


def test_unknown_option_exits_with_error():
    with pytest.raises(SystemExit) as info:
        parse_args(["--bogus"])
    assert info.value.code == 2


def test_version_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["--version"])
    assert info.value.code == 0
    assert "0.4.0" in capsys.readouterr().out