"""Transaction planning command."""

import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _load_present(args):
    """Load the present repository (JSON file or rpmdb)."""
    if getattr(args, 'system', False):
        from ...core.solv_repository import HAS_SOLV, SolvRepository
        if not HAS_SOLV:
            raise OSError("--system needs the libsolv Python bindings (python3-solv)")
        return SolvRepository.from_rpmdb(root=getattr(args, 'root', None),
                                         plugin_names=args.plugin or ())

    from ...core.repository import load_repository
    return load_repository(Path(args.present), installed=True)


def cmd_plan(args) -> int:
    """Handle plan command."""
    from ...core.config import ConfigError
    from ...core.local_transaction import LocalRepoTransaction
    from ...core.package import InvalidPackageError
    from ...core.repository import load_repository
    from ...core.transaction import Transaction
    from .. import colors, display

    if not getattr(args, 'system', False) and not args.present:
        print(colors.error("Error: PRESENT file required unless --system is given"), file=sys.stderr)
        return 1

    try:
        present_repo = _load_present(args)
        result_repo = load_repository(Path(args.result))

        if args.local:
            transaction = LocalRepoTransaction(result_repo, present_repo)
        else:
            transaction = Transaction(present_repo.get_packages(), result_repo.get_packages())
    except (InvalidPackageError, ConfigError, OSError) as e:
        print(colors.error(f"Error: {e}"), file=sys.stderr)
        return 1

    operations = transaction.operations
    logger.debug(f"Planned {len(operations)} operations")

    if getattr(args, 'output', None):
        try:
            write_plan(operations, Path(args.output))
        except OSError as e:
            print(colors.error(f"Error: cannot write {args.output}: {e}"), file=sys.stderr)
            return 1

    if display.get_mode() != display.DisplayMode.TEXT:
        for line in display.format_operations(operations, lock=args.lock):
            print(line)
        return 0

    if not operations:
        if not getattr(args, 'quiet', False):
            print(colors.install("Nothing to do"))
        return 0

    if not getattr(args, 'quiet', False):
        print(colors.heading(f"Package operations: {display.format_summary(operations)}"))
    for line in display.format_operations(operations, lock=args.lock):
        print(line)
    return 0


def write_plan(operations, path: Path):
    """Write operations as JSON to a file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump([op.to_dict() for op in operations], f, indent=2)
