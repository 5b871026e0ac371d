"""
Package model for transaction planning

A Package is an immutable record compared by identity: two packages with the
same name and version are still distinct objects (e.g. the installed and the
locked copy of a package during an update). Alias packages are the same type
with ``alias_of`` pointing at the concrete package they stand for.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class InvalidPackageError(ValueError):
    """Raised when a package definition is malformed."""


class PackageType(Enum):
    """Kind of package, as far as install ordering is concerned."""
    LIBRARY = "library"      # Ordinary package
    PLUGIN = "plugin"        # Extends the package manager at runtime
    INSTALLER = "installer"  # Provides custom install locations

    @property
    def is_plugin(self) -> bool:
        return self in (PackageType.PLUGIN, PackageType.INSTALLER)

    @classmethod
    def parse(cls, value: Optional[str]) -> 'PackageType':
        """Map a type string to a PackageType.

        Unknown types are ordinary packages.
        """
        if not value:
            return cls.LIBRARY
        value = value.lower()
        if value in ('plugin', 'composer-plugin'):
            return cls.PLUGIN
        if value in ('installer', 'composer-installer'):
            return cls.INSTALLER
        return cls.LIBRARY


@dataclass(frozen=True)
class Link:
    """A named dependency edge from a package to a target name."""
    source: str
    target: str
    constraint: str = "*"
    description: str = "requires"  # requires, provides, replaces

    def __str__(self) -> str:
        return f"{self.source} {self.description} {self.target} ({self.constraint})"


@dataclass(frozen=True, eq=False)
class Package:
    """An installable package (or an alias of one)."""
    name: str
    version: str
    type: PackageType = PackageType.LIBRARY
    requires: Tuple[Link, ...] = ()
    provides: Tuple[Link, ...] = ()
    replaces: Tuple[Link, ...] = ()
    dist_reference: Optional[str] = None
    source_reference: Optional[str] = None
    alias_of: Optional['Package'] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.name:
            raise InvalidPackageError("Package name cannot be empty")
        if not self.version:
            raise InvalidPackageError(f"Package {self.name} has no version")
        # Accept lists from callers, store tuples
        for attr in ('requires', 'provides', 'replaces'):
            value = getattr(self, attr)
            if not isinstance(value, tuple):
                object.__setattr__(self, attr, tuple(value))

    @property
    def is_alias(self) -> bool:
        return self.alias_of is not None

    @property
    def names(self) -> List[str]:
        """All names this package can be required by.

        The package name first, then provided and replaced names.
        """
        names = [self.name]
        for link in self.provides + self.replaces:
            if link.target not in names:
                names.append(link.target)
        return names

    @property
    def full_pretty_version(self) -> str:
        ref = self.source_reference or self.dist_reference
        if ref:
            return f"{self.version} {ref[:7]}"
        return self.version

    @property
    def pretty_string(self) -> str:
        return f"{self.name} ({self.version})"

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


def _relink(links: Iterable[Link], source: str) -> Tuple[Link, ...]:
    return tuple(Link(source, link.target, link.constraint, link.description)
                 for link in links)


def make_alias(target: Package, version: str, name: Optional[str] = None) -> Package:
    """Create an alias package pointing at target.

    The alias carries the target's type, references and links, re-sourced
    to the alias name. Aliasing an alias aliases its concrete package.

    Args:
        target: Package being aliased
        version: Version exposed by the alias
        name: Name exposed by the alias (default: target name)

    Returns:
        New alias Package
    """
    while target.alias_of is not None:
        target = target.alias_of
    name = name or target.name
    return Package(
        name=name,
        version=version,
        type=target.type,
        requires=_relink(target.requires, name),
        provides=_relink(target.provides, name),
        replaces=_relink(target.replaces, name),
        dist_reference=target.dist_reference,
        source_reference=target.source_reference,
        alias_of=target,
    )


def package_sort_key(package: Package) -> Tuple[str, bool, str]:
    """Sort key for deterministic package ordering.

    Meant to be used with ``reverse=True``: names sort descending, and an
    alias sorts right before the concrete package of the same name.
    """
    return (package.name, package.is_alias, package.version)


def sort_packages(packages: Iterable[Package]) -> List[Package]:
    """Return packages in planning order (see package_sort_key)."""
    return sorted(packages, key=package_sort_key, reverse=True)
