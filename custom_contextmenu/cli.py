"""CLI interface: ccm install / uninstall / status / deactivate."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .orchestrator import Notifier, Session


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccm",
        description="Custom context menu installer for the VS Code workbench",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--settings", metavar="FILE", default=None,
        help="VS Code settings.json to read options from",
    )
    parser.add_argument(
        "--install-path", metavar="DIR", default=None,
        help="VS Code app/out directory (overrides vscodeInstallPath and auto-discovery)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine activity to stderr")

    sub = parser.add_subparsers(dest="command")

    # install
    p_install = sub.add_parser("install", help="Inject the context menu script")
    p_install.add_argument("--restart", action="store_true", help="Restart VS Code afterwards")

    # uninstall
    p_uninstall = sub.add_parser("uninstall", help="Restore the workbench file from its backup")
    p_uninstall.add_argument("--restart", action="store_true", help="Restart VS Code afterwards")

    # deactivate
    sub.add_parser("deactivate", help="Uninstall without prompting (host deactivation hook)")

    # status
    p_status = sub.add_parser("status", help="Show the workbench file and patch status")
    p_status.add_argument("--json", dest="json_output", action="store_true", help="Output as JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    session = Session(
        settings_file=args.settings,
        install_path=args.install_path,
        notifier=Notifier(auto_restart=getattr(args, "restart", False)),
    )

    if args.command == "install":
        report = session.cmd_install()
        print(report.summary())
        if not report.ok:
            sys.exit(1)

    elif args.command in ("uninstall", "deactivate"):
        if args.command == "uninstall":
            report = session.cmd_uninstall()
        else:
            report = session.deactivate()
        print(report.summary())
        if not report.ok:
            sys.exit(1)

    elif args.command == "status":
        status = session.status()
        if args.json_output:
            print(json.dumps(status.to_dict(), indent=2))
        else:
            print(status.summary())
