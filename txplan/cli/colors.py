"""Color output for txplan CLI.

Each operation kind has its own color, so a plan reads at a glance:
  - Green: installs
  - Blue: updates
  - Red: removals (and errors)
  - Cyan: alias marks
"""

import os
import sys

_RESET = '\033[0m'

# ANSI codes per output role
_STYLES = {
    'install': '\033[92m',
    'update': '\033[94m',
    'remove': '\033[91m',
    'alias': '\033[96m',
    'error': '\033[1;91m',
    'heading': '\033[1m',
}

_colors_enabled = True


def init(nocolor: bool = False, stream=None):
    """Initialize color support.

    Args:
        nocolor: If True, disable colors unconditionally
        stream: Stream checked for a terminal (default: stdout)
    """
    global _colors_enabled
    stream = stream if stream is not None else sys.stdout

    # https://no-color.org/
    _colors_enabled = not (nocolor or os.environ.get('NO_COLOR') or not stream.isatty())


def _style(text: str, role: str) -> str:
    if not _colors_enabled:
        return text
    return f"{_STYLES[role]}{text}{_RESET}"


def install(text: str) -> str:
    """Format an install (green)."""
    return _style(text, 'install')


def update(text: str) -> str:
    """Format an update (blue)."""
    return _style(text, 'update')


def remove(text: str) -> str:
    """Format a removal (red)."""
    return _style(text, 'remove')


def alias(text: str) -> str:
    """Format an alias mark (cyan)."""
    return _style(text, 'alias')


def error(text: str) -> str:
    """Format an error message (bold red)."""
    return _style(text, 'error')


def heading(text: str) -> str:
    """Format a heading (bold)."""
    return _style(text, 'heading')


def count(n: int) -> str:
    """Format a count number."""
    return heading(str(n))
