"""
Transactions applied to a local installation.

Installing into a real environment adds two ordering rules on top of the
dependency order computed by Transaction:

1. Plugins (and everything they require) are installed/updated first, so
   that later installs already run with the plugins they depend on.
   Otherwise a second run could install the same packages again, in
   different locations.
2. Removals run before everything else, in case two packages resolve to
   the same install path (custom installers).
"""

import logging
import re
from typing import Iterable, List, Optional, Set

from .config import is_platform_name
from .operations import Operation
from .transaction import Transaction

logger = logging.getLogger(__name__)


def move_plugins_to_front(operations: Iterable[Operation],
                          platform_pattern: Optional[re.Pattern] = None) -> List[Operation]:
    """Move plugin installs/updates, and those of their dependencies, first.

    Operations are scanned from the end. A plugin without requirements
    goes to the very front; a plugin with requirements, and any package
    providing one of those requirements, goes to a second group and its own
    requirements are followed further. Platform names are ignored.

    Args:
        operations: Operations in dependency order
        platform_pattern: Platform name pattern (default: configured one)

    Returns:
        Reordered operation list
    """
    operations = list(operations)
    plugins_no_deps: List[Operation] = []
    plugins_with_deps: List[Operation] = []
    plugin_requires: Set[str] = set()
    moved: Set[int] = set()

    for idx in range(len(operations) - 1, -1, -1):
        package = operations[idx].target_package
        if package is None:
            continue

        is_plugin = package.type.is_plugin

        # is this a plugin or a dependency of a plugin?
        if not is_plugin and not plugin_requires.intersection(package.names):
            continue

        requires = [link.target for link in package.requires
                    if not is_platform_name(link.target, platform_pattern)]

        if is_plugin and not requires:
            plugins_no_deps.insert(0, operations[idx])
        else:
            plugin_requires.update(requires)
            plugins_with_deps.insert(0, operations[idx])
        moved.add(idx)

    if moved:
        logger.debug(f"Moving {len(plugins_no_deps)} plugins without dependencies and "
                     f"{len(plugins_with_deps)} plugins/plugin dependencies to front")

    rest = [op for idx, op in enumerate(operations) if idx not in moved]
    return plugins_no_deps + plugins_with_deps + rest


def move_uninstalls_to_front(operations: Iterable[Operation]) -> List[Operation]:
    """Move Uninstall and MarkAliasUninstalled operations first.

    Relative order is kept within both the removals and the rest.
    """
    removals = []
    rest = []
    for op in operations:
        if op.is_removal:
            removals.append(op)
        else:
            rest.append(op)
    return removals + rest


def refine(operations: Iterable[Operation],
           platform_pattern: Optional[re.Pattern] = None) -> List[Operation]:
    """Apply the local install ordering rules to an operation list."""
    # Moving plugins may have put them ahead of removals
    return move_uninstalls_to_front(move_plugins_to_front(operations, platform_pattern))


class LocalRepoTransaction(Transaction):
    """Transaction from the local (installed) repository to the locked one.

    Usage:
        transaction = LocalRepoTransaction(locked_repo, installed_repo)
        executor.run(transaction.operations)
    """

    def __init__(self, locked_repository, local_repository,
                 platform_pattern: Optional[re.Pattern] = None):
        """Initialize transaction.

        Args:
            locked_repository: Repository with the desired packages
            local_repository: Repository with the installed packages
            platform_pattern: Platform name pattern (default: configured one)
        """
        super().__init__(
            local_repository.get_packages(),
            locked_repository.get_packages(),
        )
        self._operations = refine(self._operations, platform_pattern)
