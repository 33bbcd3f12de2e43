#!/usr/bin/env python3
"""depbump CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from depbump.commands import branches as cmd_branches_module
from depbump.commands import cdn as cmd_cdn_module
from depbump.commands import config as cmd_config_module
from depbump.commands import login as cmd_login_module
from depbump.commands import presets as cmd_presets_module
from depbump.commands import run as cmd_run_module
from depbump.lib.config import ConfigStore
from depbump.lib.constants import VALID_BRANCH_POLICIES
from depbump.lib.errors import DepbumpError

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CANCELLED = 130


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='depbump',
        description='Bulk-update npm dependencies across frontend projects',
    )
    parser.add_argument('--config', '-c', type=Path, help='Config file (default: ~/.deps-cli.yaml)')
    parser.add_argument('--verbose', '-v', action='count', default=0, help='More logging (-vv for debug)')
    subparsers = parser.add_subparsers(dest='command')

    # depbump run
    p_run = subparsers.add_parser('run', help='Pick packages and branches, then update (default)')
    p_run.add_argument('--preset', help='Replay a saved preset without prompting')
    p_run.add_argument(
        '--package', '-p', action='append', dest='packages', metavar='NAME@VERSION',
        help='Package to install (repeatable); skips the package prompts',
    )
    p_run.add_argument(
        '--branch-policy', choices=VALID_BRANCH_POLICIES,
        help='What to do when a checkout is on another branch',
    )
    p_run.set_defaults(func=cmd_run_module.cmd_run)

    # depbump branches
    p_branches = subparsers.add_parser('branches', help='List branches available for update')
    p_branches.set_defaults(func=cmd_branches_module.cmd_branches)

    # depbump presets
    p_presets = subparsers.add_parser('presets', help='Manage saved presets')
    p_presets.set_defaults(func=cmd_presets_module.cmd_presets_list)
    presets_sub = p_presets.add_subparsers(dest='presets_cmd')

    p_presets_list = presets_sub.add_parser('list', help='List presets')
    p_presets_list.set_defaults(func=cmd_presets_module.cmd_presets_list)

    p_presets_show = presets_sub.add_parser('show', help='Show a preset')
    p_presets_show.add_argument('name', help='Preset name')
    p_presets_show.set_defaults(func=cmd_presets_module.cmd_presets_show)

    p_presets_delete = presets_sub.add_parser('delete', help='Delete a preset')
    p_presets_delete.add_argument('name', help='Preset name')
    p_presets_delete.set_defaults(func=cmd_presets_module.cmd_presets_delete)

    # depbump config
    p_config = subparsers.add_parser('config', help='Show or change stored settings')
    p_config.set_defaults(func=cmd_config_module.cmd_config_show)
    config_sub = p_config.add_subparsers(dest='config_cmd')

    p_config_show = config_sub.add_parser('show', help='Show settings')
    p_config_show.set_defaults(func=cmd_config_module.cmd_config_show)

    p_config_root = config_sub.add_parser('root', help='Set the project root directory')
    p_config_root.add_argument('path', help='Directory containing one checkout per project')
    p_config_root.set_defaults(func=cmd_config_module.cmd_config_root)

    p_config_creds = config_sub.add_parser('credentials', help='Set username and password')
    p_config_creds.set_defaults(func=cmd_config_module.cmd_config_credentials)

    # depbump login
    p_login = subparsers.add_parser('login', help='Log in now and store the session')
    p_login.set_defaults(func=cmd_login_module.cmd_login)

    # depbump cdn
    p_cdn = subparsers.add_parser('cdn', help='Refresh CDN URLs')
    p_cdn.add_argument('urls', nargs='+', help='URLs to refresh')
    p_cdn.set_defaults(func=cmd_cdn_module.cmd_cdn)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        # Bare "depbump" behaves like "depbump run"
        args.func = cmd_run_module.cmd_run
        args.preset = None
        args.branch_policy = None
        args.packages = None

    store = ConfigStore(args.config)
    try:
        return args.func(args, store)
    except KeyboardInterrupt:
        print("\nOperation cancelled")
        return EXIT_CANCELLED
    except DepbumpError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
