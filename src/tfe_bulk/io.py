"""Console I/O helpers for fatal errors and the confirmation prompt."""

from __future__ import annotations

import sys

CONFIRM_PROMPT = "Do you confirm the above action(s)? [y|N] "
CONFIRM_ANSWERS = frozenset({"y", "yes"})


def die(message: str, code: int = 1) -> None:
    """Print an error message and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.

    Returns:
        None. Exits the process via ``sys.exit``.

    Example:
        >>> die("fatal", code=2)
    """
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)


def read_line(text: str) -> str | None:
    """Read one line of terminal input, or ``None`` when stdin is closed."""
    try:
        return input(text)
    except EOFError:
        return None


def confirm_prompt() -> bool:
    """Ask the operator to approve the queued changes.

    Only the exact answers ``y`` and ``yes`` approve. Case matters, and
    surrounding whitespace (a trailing carriage return included) is not
    stripped, so ``Y``, `` yes`` or ``yes\r`` decline.

    Returns:
        ``True`` when the operator approved.

    Example:
        Do you confirm the above action(s)? [y|N] yes
    """
    answer = read_line(CONFIRM_PROMPT)
    if answer is None:
        return False
    return answer in CONFIRM_ANSWERS
