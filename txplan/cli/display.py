"""Display utilities for txplan CLI.

Operation lists can be shown as:
- text: One colored description per line (default, human-friendly)
- flat: "<type> <name> <version>" per line (parsable by scripts)
- json: JSON output (programmatic consumption)
"""

import json
from enum import Enum
from typing import List, Optional

from ..core.operations import Operation, OperationType
from . import colors


class DisplayMode(Enum):
    """Output display mode."""
    TEXT = "text"
    FLAT = "flat"
    JSON = "json"


# Global display settings
_display_mode = DisplayMode.TEXT

_OP_COLORS = {
    OperationType.INSTALL: colors.install,
    OperationType.UPDATE: colors.update,
    OperationType.UNINSTALL: colors.remove,
    OperationType.MARK_ALIAS_INSTALLED: colors.alias,
    OperationType.MARK_ALIAS_UNINSTALLED: colors.alias,
}


def init(mode: str = "text"):
    """Initialize display settings.

    Args:
        mode: Display mode ("text", "flat", "json")
    """
    global _display_mode
    _display_mode = DisplayMode(mode) if mode else DisplayMode.TEXT


def get_mode() -> DisplayMode:
    return _display_mode


def format_operations(operations: List[Operation], lock: bool = False,
                      mode: Optional[DisplayMode] = None) -> List[str]:
    """Format operations according to display mode.

    Args:
        operations: Operations in execution order
        lock: Describe operations as lock file changes (text mode)
        mode: Override global display mode

    Returns:
        List of formatted lines ready to print
    """
    effective_mode = mode if mode is not None else _display_mode

    if effective_mode == DisplayMode.JSON:
        return [json.dumps([op.to_dict() for op in operations], ensure_ascii=False)]

    if effective_mode == DisplayMode.FLAT:
        lines = []
        for op in operations:
            line = f"{op.op_type.value} {op.package.name} {op.package.version}"
            if op.initial_package is not None:
                line += f" {op.initial_package.version}"
            lines.append(line)
        return lines

    return [f"  - {_OP_COLORS[op.op_type](op.show(lock))}" for op in operations]


def format_summary(operations: List[Operation]) -> str:
    """One line summary: counts of installs, updates and removals."""
    installs = sum(1 for op in operations if op.op_type == OperationType.INSTALL)
    updates = sum(1 for op in operations if op.op_type == OperationType.UPDATE)
    removals = sum(1 for op in operations if op.op_type == OperationType.UNINSTALL)
    return (f"{colors.count(installs)} installs, {colors.count(updates)} updates, "
            f"{colors.count(removals)} removals")
