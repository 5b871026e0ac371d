"""
txplan - Package transaction planner

Computes the ordered list of package operations (install, update,
uninstall, alias marks) turning an installed package set into a
desired one:
- Cycle tolerant dependency ordering
- Plugin bootstrap ordering for local installs
- Removals before installs
"""

__version__ = "0.1.0"
__author__ = "txplan contributors"
