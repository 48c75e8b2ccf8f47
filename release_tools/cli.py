from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping

from release_tools.common import ReleaseToolError


Command = Callable[[list[str]], None]


def command_map() -> dict[str, Command]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main(argv)` function from one helper module; it receives
    every argument that follows the command name.
    """
    from release_tools.assert_ready_to_deploy import main as assert_ready_to_deploy
    from release_tools.pom_value import main as pom_value

    return {
        "assert-ready-to-deploy": assert_ready_to_deploy,
        "pom-value": pom_value,
    }


def build_parser(commands: Mapping[str, Command]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="release-tools",
        description="Run one release helper command.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    # Left unparsed here; each command owns its own options.
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def run_command(command: str, args: list[str], commands: Mapping[str, Command]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command](args)


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, args.args, commands)
    except ReleaseToolError as exc:
        # Keep failures to one readable line in CI logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
