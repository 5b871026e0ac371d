"""
libsolv package sources

Converts the solvables of a libsolv repository into Package records, so
that an RPM database (or any repo loaded into a libsolv pool) can be the
present side of a transaction.
"""

import logging
import platform
from typing import Dict, Iterable, List, Optional, Tuple

try:
    import solv
    HAS_SOLV = True
except ImportError:
    HAS_SOLV = False

from .package import Link, Package, PackageType

logger = logging.getLogger(__name__)


def solv_dep_keys() -> Dict[str, int]:
    """libsolv keys of the dependency arrays read from solvables."""
    return {'requires': solv.SOLVABLE_REQUIRES, 'provides': solv.SOLVABLE_PROVIDES}


def dep_name(dep_str: str) -> Optional[str]:
    """Extract the capability name from a libsolv dependency string.

    "glibc >= 2.38" -> "glibc". Rich dependencies "(a or b)" have no single
    name and return None.
    """
    dep_str = dep_str.strip()
    if not dep_str or dep_str.startswith('('):
        return None
    return dep_str.split(' ', 1)[0]


def _links(solvable, source: str, dep_type, description: str) -> Tuple[Link, ...]:
    links = []
    seen = set()
    for dep in solvable.lookup_deparray(dep_type):
        dep_str = str(dep)
        # Skip rpmlib deps and file deps
        if dep_str.startswith('rpmlib(') or dep_str.startswith('/'):
            continue
        name = dep_name(dep_str)
        if name is None or name in seen:
            continue
        seen.add(name)
        constraint = dep_str[len(name):].strip() or '*'
        links.append(Link(source, name, constraint, description))
    return tuple(links)


def package_from_solvable(solvable, plugin_names: Iterable[str] = (),
                          dep_keys: Optional[Dict[str, int]] = None) -> Package:
    """Build a Package from a libsolv solvable.

    Args:
        solvable: libsolv Solvable
        plugin_names: Names of packages to treat as plugins
        dep_keys: Keys of the requires/provides arrays (default: solv_dep_keys())
    """
    keys = dep_keys if dep_keys is not None else solv_dep_keys()
    name = solvable.name
    return Package(
        name=name,
        version=solvable.evr,
        type=PackageType.PLUGIN if name in plugin_names else PackageType.LIBRARY,
        requires=_links(solvable, name, keys['requires'], 'requires'),
        provides=tuple(link for link in _links(solvable, name, keys['provides'], 'provides')
                       if link.target != name),
    )


def packages_from_solv_repo(repo, plugin_names: Iterable[str] = (),
                            dep_keys: Optional[Dict[str, int]] = None) -> List[Package]:
    """Convert every solvable of a libsolv repo into a Package."""
    plugin_names = frozenset(plugin_names)
    if dep_keys is None:
        dep_keys = solv_dep_keys()
    packages = [package_from_solvable(s, plugin_names, dep_keys) for s in repo.solvables]
    logger.debug(f"Converted {len(packages)} solvables from repo {repo.name}")
    return packages


class SolvRepository:
    """Installed repository backed by a libsolv repo."""

    def __init__(self, repo, plugin_names: Iterable[str] = (), pool=None,
                 dep_keys: Optional[Dict[str, int]] = None):
        """Initialize repository.

        Args:
            repo: libsolv Repo
            plugin_names: Names of packages to treat as plugins
            pool: Pool owning repo (kept alive with the repository)
            dep_keys: Keys of the requires/provides arrays (default: solv_dep_keys())
        """
        self.repo = repo
        self.pool = pool
        self.plugin_names = frozenset(plugin_names)
        self.dep_keys = dep_keys
        self._packages: Optional[List[Package]] = None

    def get_packages(self) -> List[Package]:
        if self._packages is None:
            self._packages = packages_from_solv_repo(self.repo, self.plugin_names, self.dep_keys)
        return list(self._packages)

    @classmethod
    def from_rpmdb(cls, root: Optional[str] = None, arch: Optional[str] = None,
                   plugin_names: Iterable[str] = ()) -> 'SolvRepository':
        """Load installed packages from the RPM database.

        Args:
            root: Root directory of the RPM database (default: /)
            arch: System architecture (default: platform.machine())
            plugin_names: Names of packages to treat as plugins
        """
        pool = solv.Pool()
        pool.setdisttype(solv.Pool.DISTTYPE_RPM)
        pool.setarch(arch or platform.machine())
        if root:
            pool.set_rootdir(root)

        installed = pool.add_repo("@System")
        installed.appdata = {"type": "installed"}
        pool.installed = installed
        installed.add_rpmdb()
        logger.debug(f"Loaded {installed.nsolvables} installed packages from rpmdb")

        return cls(installed, plugin_names=plugin_names, pool=pool)
