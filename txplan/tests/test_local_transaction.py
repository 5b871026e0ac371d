"""Tests for local install ordering (plugins first, removals first)"""

import re

from txplan.core.local_transaction import (
    LocalRepoTransaction,
    move_plugins_to_front,
    move_uninstalls_to_front,
    refine,
)
from txplan.core.operations import Operation, OperationType
from txplan.core.package import Link, Package, PackageType, make_alias
from txplan.core.repository import ArrayRepository, InstalledArrayRepository


def pkg(name, version='1.0', requires=(), type=PackageType.LIBRARY):
    return Package(name, version, type=type, requires=[Link(name, r) for r in requires])


def plugin(name, requires=(), version='1.0'):
    return pkg(name, version, requires, type=PackageType.PLUGIN)


def names(operations):
    return [op.package.name for op in operations]


class TestMovePluginsToFront:
    """Tests for plugin bootstrap ordering."""

    def test_plugin_without_deps_first(self):
        p = plugin('P')
        q = pkg('Q', requires=['P'])
        ops = move_plugins_to_front([Operation.install(q), Operation.install(p)])
        assert names(ops) == ['P', 'Q']

    def test_plugin_dependencies_follow(self):
        lib = pkg('Lib')
        other = pkg('Other')
        p = plugin('Plugin', requires=['Lib', 'php'])
        ops = move_plugins_to_front([
            Operation.install(lib),
            Operation.install(other),
            Operation.install(p),
        ])
        assert names(ops) == ['Lib', 'Plugin', 'Other']

    def test_no_deps_group_before_with_deps_group(self):
        ops = move_plugins_to_front([
            Operation.install(pkg('Lib')),
            Operation.install(pkg('A')),
            Operation.install(plugin('WithDeps', requires=['Lib'])),
            Operation.install(plugin('NoDeps', requires=['php', 'ext-json'])),
        ])
        assert names(ops) == ['NoDeps', 'Lib', 'WithDeps', 'A']

    def test_transitive_plugin_dependencies(self):
        ops = move_plugins_to_front([
            Operation.install(pkg('Base')),
            Operation.install(pkg('App')),
            Operation.install(pkg('Lib', requires=['Base'])),
            Operation.install(plugin('Plugin', requires=['Lib'])),
        ])
        assert names(ops) == ['Base', 'Lib', 'Plugin', 'App']

    def test_installer_type_is_plugin(self):
        installer = pkg('Installer', type=PackageType.INSTALLER)
        ops = move_plugins_to_front([
            Operation.install(pkg('A')),
            Operation.install(installer),
        ])
        assert names(ops) == ['Installer', 'A']

    def test_updates_are_moved(self):
        old = plugin('P', version='1.0')
        new = plugin('P', version='2.0')
        ops = move_plugins_to_front([
            Operation.install(pkg('A')),
            Operation.update(old, new),
        ])
        assert [op.op_type for op in ops] == [OperationType.UPDATE, OperationType.INSTALL]

    def test_other_operations_untouched(self):
        p = plugin('P')
        alias = make_alias(p, '1.x-dev')
        ops = move_plugins_to_front([
            Operation.uninstall(pkg('Z')),
            Operation.mark_alias_installed(alias),
            Operation.install(p),
        ])
        assert [op.op_type for op in ops] == [
            OperationType.INSTALL,
            OperationType.UNINSTALL,
            OperationType.MARK_ALIAS_INSTALLED,
        ]

    def test_no_plugins_keeps_order(self):
        ops = [Operation.install(pkg('B')), Operation.install(pkg('A'))]
        assert move_plugins_to_front(ops) == ops

    def test_custom_platform_pattern(self):
        # With no platform names, php is a real dependency of the plugin
        ops = move_plugins_to_front([
            Operation.install(pkg('php')),
            Operation.install(pkg('A')),
            Operation.install(plugin('P', requires=['php'])),
        ], platform_pattern=re.compile(r'^$'))
        assert names(ops) == ['php', 'P', 'A']


class TestMoveUninstallsToFront:
    """Tests for removal-first ordering."""

    def test_removals_first_relative_order_kept(self):
        a = pkg('A')
        x = pkg('X')
        ops = move_uninstalls_to_front([
            Operation.install(a),
            Operation.uninstall(pkg('B')),
            Operation.mark_alias_uninstalled(make_alias(x, '1.x-dev')),
            Operation.update(pkg('C', '1.0'), pkg('C', '2.0')),
            Operation.uninstall(pkg('D')),
        ])
        assert [(op.op_type, op.package.name) for op in ops] == [
            (OperationType.UNINSTALL, 'B'),
            (OperationType.MARK_ALIAS_UNINSTALLED, 'X'),
            (OperationType.UNINSTALL, 'D'),
            (OperationType.INSTALL, 'A'),
            (OperationType.UPDATE, 'C'),
        ]


class TestRefine:
    """Tests for the combined passes."""

    def test_removals_stay_before_plugins(self):
        ops = refine([Operation.uninstall(pkg('Z')), Operation.install(plugin('P'))])
        assert [op.op_type for op in ops] == [OperationType.UNINSTALL, OperationType.INSTALL]

    def test_every_removal_before_other_operations(self):
        ops = refine([
            Operation.install(pkg('A')),
            Operation.uninstall(pkg('B')),
            Operation.install(plugin('P')),
            Operation.mark_alias_uninstalled(make_alias(pkg('X'), '2.x-dev')),
        ])
        kinds = [op.is_removal for op in ops]
        assert kinds == [True, True, False, False]
        assert names(ops)[2:] == ['P', 'A']


class TestLocalRepoTransaction:
    """Tests for transactions on a local repository."""

    def test_plugin_installed_before_dependents(self):
        p = plugin('P')
        q = pkg('Q', requires=['P'])
        transaction = LocalRepoTransaction(ArrayRepository([q, p]), InstalledArrayRepository())
        assert names(transaction.operations) == ['P', 'Q']

    def test_plugin_first_even_when_named_late(self):
        # Alpha does not depend on the plugin, but would be planned first
        result = ArrayRepository([pkg('Alpha'), plugin('Zplugin'), pkg('App', requires=['Zplugin'])])
        ops = LocalRepoTransaction(result, InstalledArrayRepository()).operations
        assert names(ops)[0] == 'Zplugin'
        assert names(ops).index('Zplugin') < names(ops).index('App')

    def test_transitive_plugin_requirement(self):
        result = ArrayRepository([
            pkg('Q', requires=['R']),
            pkg('R', requires=['P']),
            plugin('P', requires=['php']),
        ])
        ops = LocalRepoTransaction(result, InstalledArrayRepository()).operations
        assert names(ops) == ['P', 'R', 'Q']

    def test_uninstalls_first(self):
        installed = InstalledArrayRepository([pkg('Old'), pkg('Lib', '1.0')])
        locked = ArrayRepository([
            pkg('App'),
            plugin('Plugin', requires=['Lib']),
            pkg('Lib', '2.0'),
        ])

        ops = LocalRepoTransaction(locked, installed).operations

        assert [(op.op_type, op.package.name) for op in ops] == [
            (OperationType.UNINSTALL, 'Old'),
            (OperationType.UPDATE, 'Lib'),
            (OperationType.INSTALL, 'Plugin'),
            (OperationType.INSTALL, 'App'),
        ]
