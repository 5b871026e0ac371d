"""
Operation records produced by transaction planning.

An operation is an immutable value: what to do (OperationType) and the
package(s) it applies to. The executor performs them in list order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .package import Package
from .version import is_upgrade


class OperationType(Enum):
    """Type of package operation."""
    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"
    MARK_ALIAS_INSTALLED = "markAliasInstalled"
    MARK_ALIAS_UNINSTALLED = "markAliasUninstalled"


REMOVAL_TYPES = (OperationType.UNINSTALL, OperationType.MARK_ALIAS_UNINSTALLED)


@dataclass(frozen=True)
class Operation:
    """A single planned operation.

    package is the package acted upon (the new package for updates);
    initial_package is the installed package an update replaces.
    """
    op_type: OperationType
    package: Package
    initial_package: Optional[Package] = None

    @classmethod
    def install(cls, package: Package) -> 'Operation':
        return cls(OperationType.INSTALL, package)

    @classmethod
    def update(cls, initial: Package, target: Package) -> 'Operation':
        return cls(OperationType.UPDATE, target, initial)

    @classmethod
    def uninstall(cls, package: Package) -> 'Operation':
        return cls(OperationType.UNINSTALL, package)

    @classmethod
    def mark_alias_installed(cls, package: Package) -> 'Operation':
        return cls(OperationType.MARK_ALIAS_INSTALLED, package)

    @classmethod
    def mark_alias_uninstalled(cls, package: Package) -> 'Operation':
        return cls(OperationType.MARK_ALIAS_UNINSTALLED, package)

    @property
    def is_removal(self) -> bool:
        return self.op_type in REMOVAL_TYPES

    @property
    def target_package(self) -> Optional[Package]:
        """Package being installed or updated to, None for other operations."""
        if self.op_type in (OperationType.INSTALL, OperationType.UPDATE):
            return self.package
        return None

    def show(self, lock: bool = False) -> str:
        """Human readable description of the operation.

        Args:
            lock: Describe the operation as a lock file change
        """
        pkg = self.package
        if self.op_type == OperationType.INSTALL:
            verb = 'Locking' if lock else 'Installing'
            return f"{verb} {pkg.pretty_string}"

        if self.op_type == OperationType.UNINSTALL:
            verb = 'Unlocking' if lock else 'Removing'
            return f"{verb} {pkg.pretty_string}"

        if self.op_type == OperationType.UPDATE:
            initial = self.initial_package
            verb = 'Upgrading' if is_upgrade(initial.version, pkg.version) else 'Downgrading'
            if initial.version == pkg.version:
                from_version = initial.full_pretty_version
                to_version = pkg.full_pretty_version
            else:
                from_version = initial.version
                to_version = pkg.version
            return f"{verb} {pkg.name} ({from_version} => {to_version})"

        state = 'installed' if self.op_type == OperationType.MARK_ALIAS_INSTALLED else 'uninstalled'
        return (f"Marking {pkg.pretty_string} as {state}, "
                f"alias of {pkg.alias_of.pretty_string}")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        data = {
            'type': self.op_type.value,
            'name': self.package.name,
            'version': self.package.version,
        }
        if self.initial_package is not None:
            data['from_version'] = self.initial_package.version
        if self.package.alias_of is not None:
            data['alias_of'] = self.package.alias_of.pretty_string
        return data

    def __str__(self) -> str:
        return self.show()
