"""
Package repositories

In-memory package sources exposing get_packages(), and a loader building
them from JSON documents:

    [
        {"name": "a", "version": "2.0", "type": "plugin",
         "require": {"b": "^1.0", "php": ">=8.1"},
         "source_reference": "0f3c..."},
        {"name": "b", "version": "1.0"},
        {"name": "b", "version": "1.x-dev", "alias_of": {"name": "b", "version": "1.0"}}
    ]
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .package import InvalidPackageError, Link, Package, PackageType, make_alias

logger = logging.getLogger(__name__)


class ArrayRepository:
    """Repository holding packages in memory."""

    def __init__(self, packages: Optional[Iterable[Package]] = None):
        self._packages: List[Package] = []
        for package in packages or []:
            self.add_package(package)

    def add_package(self, package: Package):
        self._packages.append(package)

    def get_packages(self) -> List[Package]:
        return list(self._packages)

    def find_packages(self, name: str) -> List[Package]:
        """Packages exposing name (own name, provide or replace)."""
        return [p for p in self._packages if name in p.names]

    def has_package(self, package: Package) -> bool:
        return any(p is package for p in self._packages)

    def count(self) -> int:
        return len(self._packages)

    def __len__(self) -> int:
        return len(self._packages)


class InstalledArrayRepository(ArrayRepository):
    """Repository of packages installed in the local environment."""


def _parse_links(source: str, value: Any, description: str) -> Tuple[Link, ...]:
    """Parse a require/provide/replace value (mapping or list of names)."""
    if not value:
        return ()
    if isinstance(value, dict):
        return tuple(Link(source, str(target), str(constraint or '*'), description)
                     for target, constraint in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(Link(source, str(target), '*', description) for target in value)
    raise InvalidPackageError(f"{source}: '{description}' must be a mapping or a list")


def package_from_dict(data: Dict[str, Any]) -> Package:
    """Build a concrete package from a dict.

    Raises:
        InvalidPackageError: If required keys are missing or malformed
    """
    if not isinstance(data, dict):
        raise InvalidPackageError(f"Package entry must be an object, got {type(data).__name__}")
    name = data.get('name')
    version = data.get('version')
    if not name or not version:
        raise InvalidPackageError("Package entry needs 'name' and 'version'")
    name = str(name)

    return Package(
        name=name,
        version=str(version),
        type=PackageType.parse(data.get('type')),
        requires=_parse_links(name, data.get('require', data.get('requires')), 'requires'),
        provides=_parse_links(name, data.get('provide', data.get('provides')), 'provides'),
        replaces=_parse_links(name, data.get('replace', data.get('replaces')), 'replaces'),
        dist_reference=data.get('dist_reference'),
        source_reference=data.get('source_reference'),
    )


def repository_from_data(entries: List[Dict[str, Any]], installed: bool = False) -> ArrayRepository:
    """Build a repository from a list of package dicts.

    Alias entries (with 'alias_of') are resolved after all concrete entries,
    so their order in the list does not matter.

    Args:
        entries: Package dicts
        installed: Build an InstalledArrayRepository

    Returns:
        Repository with packages in entry order

    Raises:
        InvalidPackageError: On malformed entries (message includes the index)
    """
    if not isinstance(entries, list):
        raise InvalidPackageError("Package document must be a list of packages")

    packages: List[Optional[Package]] = []
    concrete: Dict[Tuple[str, str], Package] = {}
    aliases = []

    for idx, entry in enumerate(entries):
        if isinstance(entry, dict) and entry.get('alias_of') is not None:
            aliases.append((idx, entry))
            packages.append(None)
            continue
        try:
            package = package_from_dict(entry)
        except InvalidPackageError as e:
            raise InvalidPackageError(f"Package #{idx}: {e}") from e
        concrete[(package.name, package.version)] = package
        packages.append(package)

    for idx, entry in aliases:
        target_ref = entry['alias_of']
        if not isinstance(target_ref, dict) or 'name' not in target_ref or 'version' not in target_ref:
            raise InvalidPackageError(f"Package #{idx}: 'alias_of' needs 'name' and 'version'")
        target = concrete.get((str(target_ref['name']), str(target_ref['version'])))
        if target is None:
            raise InvalidPackageError(
                f"Package #{idx}: alias target {target_ref['name']} ({target_ref['version']}) not found"
            )
        if not entry.get('version'):
            raise InvalidPackageError(f"Package #{idx}: alias needs a 'version'")
        alias_name = entry.get('name')
        if alias_name is not None and (not isinstance(alias_name, str) or not alias_name):
            raise InvalidPackageError(f"Package #{idx}: alias 'name' must be a non-empty string")
        packages[idx] = make_alias(target, str(entry['version']), alias_name)

    repo_class = InstalledArrayRepository if installed else ArrayRepository
    return repo_class(packages)


def load_repository(path: Path, installed: bool = False) -> ArrayRepository:
    """Load a repository from a JSON file.

    Raises:
        InvalidPackageError: If the file is not valid JSON or has bad entries
        OSError: If the file cannot be read
    """
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidPackageError(f"{path}: invalid JSON: {e}") from e

    # Accept lock-file style documents: {"packages": [...]}
    if isinstance(data, dict) and 'packages' in data:
        data = data['packages']

    repo = repository_from_data(data, installed=installed)
    logger.debug(f"Loaded {len(repo)} packages from {path}")
    return repo
