"""
Command-line access to the activity history.

  reportes list               -- print the latest records
  reportes export [--out DIR] -- write historial_<date>.xlsx (or .csv)
"""
from __future__ import annotations

import argparse
import sys

from reportes.core.config import get_settings
from reportes.core.logging import get_logger
from reportes.history.export import ExportError, export_history, save_export
from reportes.history.loader import HistoryLoader
from reportes.history.render import EMPTY_TEXT, Panel, row_views, select_panel

logger = get_logger(__name__)


def _load(loader: HistoryLoader) -> bool:
    state = loader.refresh()
    if select_panel(state) is Panel.ERROR:
        print(state.error, file=sys.stderr)
        return False
    return True


def cmd_list(loader: HistoryLoader, args: argparse.Namespace) -> int:
    if not _load(loader):
        return 1
    rows = row_views(loader.state)
    if not rows:
        print(EMPTY_TEXT)
        return 0
    for row in rows:
        print(f"{row.icon} {row.headline}  ({row.when})")
    return 0


def cmd_export(loader: HistoryLoader, args: argparse.Namespace) -> int:
    if not _load(loader):
        return 1
    if not loader.start_export():
        print(EMPTY_TEXT)
        return 0
    try:
        export = export_history(loader.state.items, prefer_xlsx=not args.csv)
        if export is None:
            return 0
        path = save_export(export, args.out)
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        return 1
    finally:
        loader.finish_export()
    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reportes", description="Activity history viewer")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Print the latest history records")
    p_list.set_defaults(func=cmd_list)

    p_export = sub.add_parser("export", help="Export the history to a spreadsheet")
    p_export.add_argument("--out", default=get_settings().export_dir, help="Target directory")
    p_export.add_argument("--csv", action="store_true", help="Skip XLSX and write CSV")
    p_export.set_defaults(func=cmd_export)
    return parser


def main(argv: list[str] | None = None, loader: HistoryLoader | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(loader or HistoryLoader(), args)


if __name__ == "__main__":
    sys.exit(main())
