"""Core modules for txplan"""

from .package import InvalidPackageError, Link, Package, PackageType, make_alias
from .operations import Operation, OperationType
from .transaction import Transaction, compute
from .local_transaction import LocalRepoTransaction, refine

__all__ = [
    'InvalidPackageError', 'Link', 'Package', 'PackageType', 'make_alias',
    'Operation', 'OperationType',
    'Transaction', 'compute',
    'LocalRepoTransaction', 'refine',
]
