"""Command-line options of the game server."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

_log = logging.getLogger(__name__)

_USAGE_EXAMPLE = "Example: game_server --config-file /data/config.json --www-root static"
_EXIT_FAILURE = 1

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


@dataclass
class Args:
    tick_period: int = 0
    config_file: str = ""
    www_root: str = ""
    randomize_spawn_points: bool = False
    state_file: str = ""
    save_state_period: int = 0


class ConfigFileNotSpecifiedError(Exception):
    """The --config-file option is missing."""

    def __init__(self, message: str = "Config file have not been specified.") -> None:
        super().__init__(message)


class StaticContentPathNotSpecifiedError(Exception):
    """The --www-root option is missing."""

    def __init__(self, message: str = "Static content path is not specified.") -> None:
        super().__init__(message)


def _unsigned(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}")
    return value


def _boolean(text: str) -> bool:
    word = text.lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="game_server", description="All options", exit_on_error=False
    )
    parser.add_argument("-t", "--tick-period", type=_unsigned, metavar="milliseconds",
                        help="set tick period")
    parser.add_argument("-c", "--config-file", metavar="file", help="set config file path")
    parser.add_argument("-w", "--www-root", metavar="dir", help="set static files root")
    parser.add_argument("--randomize-spawn-points", type=_boolean, metavar="bool",
                        help="spawn dogs at random positions")
    parser.add_argument("--state-file", metavar="file",
                        help="set file for save and restore game state")
    parser.add_argument("--save-state-period", type=_unsigned, metavar="milliseconds",
                        help="set save game state period")
    return parser


def _report(message: str, usage: str) -> None:
    _log.error(
        "%s",
        message,
        extra={"Usage": usage, "Example": _USAGE_EXAMPLE, "exit_code": _EXIT_FAILURE},
    )


def parse_command_line(argv: Optional[Sequence[str]] = None) -> Args:
    """Parse the server options; --help prints usage and exits with status 0."""
    if argv is None:
        argv = sys.argv[1:]
    ns = _parser().parse_args(list(argv))

    if ns.config_file is None:
        www_root = "" if ns.www_root is not None else " --www-root <path-to-static-files>"
        _report("Config file have not been specified", "game_server " + www_root)
        raise ConfigFileNotSpecifiedError()

    if ns.www_root is None:
        _report(
            "Static content path is not specified",
            "game_server --config-file /data/config.json",
        )
        raise StaticContentPathNotSpecifiedError()

    defaults = Args()
    return Args(
        tick_period=ns.tick_period if ns.tick_period is not None else defaults.tick_period,
        config_file=ns.config_file,
        www_root=ns.www_root,
        randomize_spawn_points=(
            ns.randomize_spawn_points
            if ns.randomize_spawn_points is not None
            else defaults.randomize_spawn_points
        ),
        state_file=ns.state_file if ns.state_file is not None else defaults.state_file,
        save_state_period=(
            ns.save_state_period
            if ns.save_state_period is not None
            else defaults.save_state_period
        ),
    )