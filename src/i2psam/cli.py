"""
CLI interface for i2psam.

Provides command-line tools for talking to an I2P router's SAM bridge.
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from i2psam import __version__, output
from i2psam.cli_helpers import get_sam_address, get_timeout, load_keys, parse_option, save_keys
from i2psam.sam import Sam, SamError, SessionStyle


def _connect(args: argparse.Namespace) -> Sam:
    output.verbose(f"Using SAM bridge at {args.sam} (timeout {args.timeout}s)")
    return Sam.connect(args.sam, timeout=args.timeout)


def cmd_version(args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
    """Display the i2psam version."""
    print(__version__)
    return 0


def cmd_hello(args: argparse.Namespace) -> int:
    """Check that the bridge speaks SAMv3."""
    try:
        output.explain("Negotiating the SAM protocol version with the bridge")
        with _connect(args):
            print(f"SAM bridge at {args.sam} speaks SAMv3")
        return 0
    except (SamError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate a new destination."""
    try:
        with _connect(args) as sam:
            keys = sam.new_keys()

        print(f"Address:  {keys.address.base32}")
        print(f"Public:   {keys.address.destination}")

        if args.save:
            path = Path(args.save)
            save_keys(keys, path)
            print(f"Keys saved to {path}", file=sys.stderr)
        else:
            print("Private keys not saved (use --save FILE)", file=sys.stderr)
        return 0

    except (SamError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_lookup(args: argparse.Namespace) -> int:
    """Resolve a name to a destination."""
    try:
        with _connect(args) as sam:
            address = sam.lookup(args.name)

        print(f"Name:     {args.name}")
        print(f"Address:  {address.base32}")
        print(f"Public:   {address.destination}")
        return 0

    except (SamError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_session(args: argparse.Namespace) -> int:
    """Create a session and optionally keep it open."""
    try:
        options = [parse_option(opt) for opt in args.option]

        with _connect(args) as sam:
            if args.keys:
                output.verbose(f"Loading keys from {args.keys}")
                keys = load_keys(Path(args.keys))
            else:
                output.explain("No key file given, generating a fresh destination")
                keys = sam.new_keys()

            session = sam.new_session(
                args.style, args.id, keys, options=options, extras=args.extra
            )

        with session:
            print(f"Session:  {session.session_id} ({session.style.value})")
            print(f"Address:  {session.keys.address.base32}")
            if args.hold:
                print("Session open, press Ctrl-C to close", file=sys.stderr)
                session.wait_closed()
                print("Error: session closed by the bridge", file=sys.stderr)
                return 1
        return 0

    except (SamError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


class _SubcommandHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter to clean up subcommand help display."""

    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=28)

    def _format_action(self, action: argparse.Action) -> str:
        # pylint: disable-next=protected-access
        if isinstance(action, argparse._SubParsersAction):
            lines = []
            for choice_action in action._choices_actions:  # pylint: disable=protected-access
                name = choice_action.metavar or choice_action.dest
                cmd_help = choice_action.help or ""
                lines.append(f"  {name:<24}{cmd_help}")
            return "\n".join(lines) + "\n"
        return super()._format_action(action)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="i2psam",
        description="I2P SAMv3 bridge client",
        formatter_class=_SubcommandHelpFormatter,
    )

    # Global flags (available on all commands)
    parser.add_argument(
        "-e", "--explain", action="store_true", help="Show brief explanations of what's happening"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for protocol info, -vv for raw lines)",
    )
    parser.add_argument(
        "--sam",
        metavar="ADDRESS",
        default=get_sam_address(),
        help="SAM bridge host:port (default: $I2PSAM_ADDRESS or 127.0.0.1:7656)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        default=get_timeout(),
        help="Socket timeout (default: $I2PSAM_TIMEOUT or 30)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="", title="commands")

    # version command
    subparsers.add_parser("version", help="Display the i2psam version")

    # hello command
    subparsers.add_parser("hello", help="Check that the bridge speaks SAMv3")

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a new destination")
    generate_parser.add_argument("--save", metavar="FILE", help="Write the keys to FILE (JSON)")

    # lookup command
    lookup_parser = subparsers.add_parser("lookup", help="Resolve a name to a destination")
    lookup_parser.add_argument("name", metavar="NAME", help="Name, e.g. example.i2p")

    # session command
    session_parser = subparsers.add_parser("session", help="Create a session")
    session_parser.add_argument("id", metavar="ID", help="Session id (unique per bridge)")
    session_parser.add_argument(
        "--style",
        choices=[s.value for s in SessionStyle],
        default=SessionStyle.STREAM.value,
        help="Session style (default: STREAM)",
    )
    session_parser.add_argument(
        "--keys", metavar="FILE", help="Key file from 'generate --save' (default: new keys)"
    )
    session_parser.add_argument(
        "-o",
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="I2CP/streaming option (repeatable)",
    )
    session_parser.add_argument(
        "--extra",
        action="append",
        default=[],
        metavar="TOKEN",
        help="Extra token appended to SESSION CREATE (repeatable)",
    )
    session_parser.add_argument(
        "--hold", action="store_true", help="Keep the session open until Ctrl-C"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the i2psam CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure output verbosity from global flags
    # -v enables verbose, -vv enables both verbose and debug
    verbosity = args.verbose
    output.configure(
        explain=args.explain,
        verbose=verbosity >= 1,
        debug=verbosity >= 2,
    )

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handler
    commands: dict[str, Callable[[argparse.Namespace], int]] = {
        "version": cmd_version,
        "hello": cmd_hello,
        "generate": cmd_generate,
        "lookup": cmd_lookup,
        "session": cmd_session,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
