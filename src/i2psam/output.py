"""
Diagnostic output for i2psam.

Three channels, all written to stderr and all off by default:

- explain: one-line descriptions of what is happening, for newcomers
- verbose: protocol-level progress (commands sent, replies classified)
- debug: raw wire lines (with key material redacted)
"""

import sys

_explain = False
_verbose = False
_debug = False


def configure(explain: bool = False, verbose: bool = False, debug: bool = False) -> None:
    """
    Enable or disable output channels.

    Args:
        explain: Show brief explanations
        verbose: Show protocol information
        debug: Show raw protocol lines
    """
    global _explain, _verbose, _debug  # noqa: PLW0603
    _explain = explain
    _verbose = verbose
    _debug = debug


def explain(message: str) -> None:
    """Print an explanation if enabled."""
    if _explain:
        print(f"[explain] {message}", file=sys.stderr)


def verbose(message: str) -> None:
    """Print protocol information if enabled."""
    if _verbose:
        print(f"[verbose] {message}", file=sys.stderr)


def debug(message: str) -> None:
    """Print debug information if enabled."""
    if _debug:
        print(f"[debug] {message}", file=sys.stderr)
