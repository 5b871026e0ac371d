"""
Main CLI entry point for txplan

Commands:
- txplan plan / txplan p   Compute the operations between two package sets
"""

import argparse
import sys

from .. import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all commands and aliases."""

    parser = argparse.ArgumentParser(
        prog='txplan',
        description='Package transaction planner',
        epilog='Use "txplan <command> --help" for command-specific help.'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'txplan {__version__}'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output (debug logging on stderr)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Quiet output'
    )

    parser.add_argument(
        '--nocolor',
        action='store_true',
        help='Disable colored output'
    )

    # Parent parser for display options (inherited by subparsers)
    display_parent = argparse.ArgumentParser(add_help=False)
    display_parent.add_argument(
        '--json',
        action='store_true',
        help='JSON output for scripting'
    )
    display_parent.add_argument(
        '--flat',
        action='store_true',
        help='Flat output (one operation per line, parsable)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        metavar='<command>'
    )

    # =========================================================================
    # plan / p
    # =========================================================================
    plan_parser = subparsers.add_parser(
        'plan', aliases=['p'],
        help='Compute operations turning PRESENT packages into RESULT packages',
        parents=[display_parent]
    )
    plan_parser.add_argument(
        'present', nargs='?',
        help='JSON file with the installed packages (omit with --system)'
    )
    plan_parser.add_argument(
        'result',
        help='JSON file with the desired packages'
    )
    plan_parser.add_argument(
        '--local', '-l',
        action='store_true',
        help='Order for a local install (plugins first, removals first)'
    )
    plan_parser.add_argument(
        '--lock',
        action='store_true',
        help='Describe operations as lock file changes'
    )
    plan_parser.add_argument(
        '--system',
        action='store_true',
        help='Read installed packages from the RPM database (needs libsolv)'
    )
    plan_parser.add_argument(
        '--root',
        metavar='DIR',
        help='RPM database root for --system'
    )
    plan_parser.add_argument(
        '--plugin',
        action='append',
        metavar='NAME',
        help='Treat installed package NAME as a plugin (with --system, repeatable)'
    )
    plan_parser.add_argument(
        '--output', '-o',
        metavar='FILE',
        help='Also write the operations as JSON to FILE'
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbose flag
    if getattr(args, 'verbose', False):
        import logging
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr
        )

    from . import colors
    colors.init(nocolor=getattr(args, 'nocolor', False))

    from . import display
    if getattr(args, 'json', False):
        display.init(mode='json')
    elif getattr(args, 'flat', False):
        display.init(mode='flat')
    else:
        display.init(mode='text')

    if not args.command:
        parser.print_help()
        return 1

    if args.command in ('plan', 'p'):
        from .commands import cmd_plan
        return cmd_plan(args)

    print(f"Command '{args.command}' not yet implemented")
    return 1


if __name__ == '__main__':
    sys.exit(main())
