"""
Transaction planning

Computes the operations turning a present package set into a result
package set. The result set is already consistent (a solver decided it);
this module only diffs the two sets and orders the operations so that
dependencies are installed before the packages requiring them.

Packages are placed in an arena ordered by package_sort_key and referred to
by their index (handle) from then on:

    result packages --sort--> arena [p0, p1, ...]
                              by_name {name: [handles]}
                              edges   [[provider handles], ...]

Traversal is an iterative postorder DFS over the edges that tolerates
cycles: a package is emitted on its second encounter, and skipped once
processed.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .operations import Operation, OperationType
from .package import Link, Package, sort_packages

logger = logging.getLogger(__name__)


class Transaction:
    """Ordered operations between a present and a result package set.

    Usage:
        transaction = Transaction(installed_packages, locked_packages)
        for op in transaction.operations:
            print(op.show())
    """

    def __init__(self, present_packages: Iterable[Package],
                 result_packages: Iterable[Package]):
        """Initialize and compute the transaction.

        Args:
            present_packages: Packages present before the transaction
            result_packages: Packages that should be present afterwards
        """
        self.present_packages = list(present_packages)
        self._set_result_package_maps(result_packages)
        self._operations = self._calculate_operations()

    @property
    def operations(self) -> List[Operation]:
        return list(self._operations)

    # =========================================================================
    # Result maps
    # =========================================================================

    def _set_result_package_maps(self, result_packages: Iterable[Package]):
        """Build the package arena, the by-name index and the edges."""
        unique = {}
        for package in result_packages:
            unique.setdefault(id(package), package)
        # An alias always needs its target in the arena
        pending = list(unique.values())
        while pending:
            package = pending.pop()
            target = package.alias_of
            if target is not None and id(target) not in unique:
                logger.debug(f"Adding alias target {target} of {package} to result")
                unique[id(target)] = target
                pending.append(target)

        self.result_packages: List[Package] = sort_packages(unique.values())
        self._handles: Dict[int, int] = {
            id(package): handle for handle, package in enumerate(self.result_packages)
        }

        # Handles are assigned in sort order, so appending in handle order
        # keeps every by-name list sorted as well
        self._by_name: Dict[str, List[int]] = {}
        for handle, package in enumerate(self.result_packages):
            for name in package.names:
                self._by_name.setdefault(name, []).append(handle)

        self._requires: List[List[int]] = []
        self._edges: List[List[int]] = []
        for package in self.result_packages:
            required = []
            for link in package.requires:
                required.extend(self._get_providers_in_result(link))
            self._requires.append(required)
            if package.alias_of is not None:
                self._edges.append([self._handles[id(package.alias_of)]])
            else:
                self._edges.append(required)

        logger.debug(f"Result set: {len(self.result_packages)} packages, "
                     f"{len(self._by_name)} names")

    def _get_providers_in_result(self, link: Link) -> List[int]:
        """Handles of the result packages providing a link's target."""
        return self._by_name.get(link.target, [])

    def get_providers(self, link: Link) -> List[Package]:
        """Result packages providing a link's target, in planning order."""
        return [self.result_packages[h] for h in self._get_providers_in_result(link)]

    # =========================================================================
    # Roots
    # =========================================================================

    def _get_root_handles(self, candidates: List[int]) -> List[int]:
        """Determine which candidates are not required by any other candidate.

        These serve as starting points to enumerate packages in a topological
        order despite potential cycles. If the candidates are cyclic at the
        top level, the package with the lowest name is picked.

        Args:
            candidates: Handles in arena order

        Returns:
            Root handles in arena order
        """
        candidate_set = set(candidates)
        required = set()
        for handle in candidates:
            for dep in self._requires[handle]:
                if dep != handle and dep in candidate_set:
                    required.add(dep)

        roots = [h for h in candidates if h not in required]
        if not roots and candidates:
            lowest = min(candidates, key=lambda h: (self.result_packages[h].name, h))
            logger.debug(f"Cyclic top level, using {self.result_packages[lowest]} as root")
            roots = [lowest]
        return roots

    def get_root_packages(self) -> List[Package]:
        """Result packages not required by any other result package."""
        handles = self._get_root_handles(list(range(len(self.result_packages))))
        return [self.result_packages[h] for h in handles]

    # =========================================================================
    # Operations
    # =========================================================================

    def _calculate_operations(self) -> List[Operation]:
        operations: List[Operation] = []

        present_package_map: Dict[str, Package] = {}
        present_alias_map: Dict[Tuple[str, str], Package] = {}
        for package in self.present_packages:
            if package.is_alias:
                present_alias_map[(package.name, package.version)] = package
            else:
                present_package_map[package.name] = package
        remove_map = dict(present_package_map)
        remove_alias_map = dict(present_alias_map)

        count = len(self.result_packages)
        visited = [False] * count
        processed = [False] * count

        stack = self._get_root_handles(list(range(count)))
        logger.debug(f"Root packages: {[str(self.result_packages[h]) for h in stack]}")

        while stack:
            while stack:
                handle = stack.pop()

                if processed[handle]:
                    continue

                if not visited[handle]:
                    visited[handle] = True
                    stack.append(handle)
                    stack.extend(self._edges[handle])
                    continue

                processed[handle] = True
                op = self._process_package(
                    self.result_packages[handle],
                    present_package_map, remove_map,
                    present_alias_map, remove_alias_map,
                )
                if op is not None:
                    operations.append(op)

            # Cycles not reachable from any root
            unvisited = [h for h in range(count) if not visited[h]]
            if unvisited:
                stack = self._get_root_handles(unvisited)
                logger.debug(f"Unreached packages left, continuing from "
                             f"{[str(self.result_packages[h]) for h in stack]}")

        for name in sorted(remove_map, reverse=True):
            operations.insert(0, Operation.uninstall(remove_map[name]))
        for key in sorted(remove_alias_map):
            operations.append(Operation.mark_alias_uninstalled(remove_alias_map[key]))

        if logger.isEnabledFor(logging.DEBUG):
            counts = {t.value: n for t, n in count_by_type(operations).items()}
            logger.debug(f"Computed {len(operations)} operations: {counts}")

        return operations

    def _process_package(self, package: Package,
                         present_package_map: Dict[str, Package],
                         remove_map: Dict[str, Package],
                         present_alias_map: Dict[Tuple[str, str], Package],
                         remove_alias_map: Dict[Tuple[str, str], Package]) -> Optional[Operation]:
        """Emit the operation for a package whose dependencies were handled."""
        if package.is_alias:
            alias_key = (package.name, package.version)
            if alias_key in present_alias_map:
                remove_alias_map.pop(alias_key, None)
                return None
            return Operation.mark_alias_installed(package)

        source = present_package_map.get(package.name)
        remove_map.pop(package.name, None)
        if source is None:
            return Operation.install(package)

        # do we need to update?
        if (package.version != source.version
                or package.dist_reference != source.dist_reference
                or package.source_reference != source.source_reference):
            return Operation.update(source, package)
        return None


def compute(present_packages: Iterable[Package],
            result_packages: Iterable[Package]) -> List[Operation]:
    """Compute the ordered operations between two package sets."""
    return Transaction(present_packages, result_packages).operations


def count_by_type(operations: Iterable[Operation]) -> Dict[OperationType, int]:
    """Count operations per OperationType (types without operations omitted)."""
    counts: Dict[OperationType, int] = {}
    for op in operations:
        counts[op.op_type] = counts.get(op.op_type, 0) + 1
    return counts
