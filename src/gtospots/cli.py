"""Command-line entry points for checking and maintaining the spot store."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, get_args

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.models import BatchReport, HandIntent, NodeIntent, TurnType
from .features.integrity import IntegrityConfig, IntegrityService, SpotRejected
from .store.json_store import SpotStore, StoreError

logger = logging.getLogger(__name__)

_err = Console(stderr=True)


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _service(store: str | None) -> IntegrityService:
    path = Path(store) if store else IntegrityConfig.from_env().store_path
    return IntegrityService(store=SpotStore(path))


def _read_spot(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with Path(source).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _render_failures(report: BatchReport) -> None:
    if not report.failures:
        return
    table = Table(title="Failing spots", box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("Spot", style="bold cyan", no_wrap=True)
    table.add_column("Errors", style="red")
    for failure in report.failures:
        table.add_row(failure.spot_id, "\n".join(failure.errors))
    _err.print(table)


def _render_errors(title: str, errors: tuple[str, ...] | list[str]) -> None:
    body = "\n".join(f"- {error}" for error in errors) or "(no details)"
    _err.print(Panel(body, title=title, border_style="red", expand=False))


# ---------------------------------------------------------------- commands
def _cmd_validate_store(args: argparse.Namespace) -> int:
    report = _service(args.store).validate_store()
    _render_failures(report)
    _print_json(report.counts())
    return report.exit_code


def _cmd_repair_store(args: argparse.Namespace) -> int:
    repaired, total = _service(args.store).repair_store()
    _print_json({"repaired": repaired, "total": total})
    return 0


def _cmd_validate_spot(args: argparse.Namespace) -> int:
    spot = _read_spot(args.source)
    result = _service(args.store).validate(spot)
    if not result.ok:
        _render_errors("Invalid spot", result.errors)
    _print_json(result.to_dict())
    return 0 if result.ok else 1


def _cmd_commit_spot(args: argparse.Namespace) -> int:
    spot = _read_spot(args.source)
    try:
        spot_id = _service(args.store).commit(spot)
    except SpotRejected as exc:
        _render_errors(f"Rejected {exc.spot_id or 'spot'}", exc.errors)
        _print_json({"committed": None, "errors": list(exc.errors)})
        return 1
    _print_json({"committed": spot_id})
    return 0


def _cmd_lookup_freq(args: argparse.Namespace) -> int:
    service = _service(args.store)
    _print_json(service.frequencies(args.hand_intent, args.turn_type, args.node_intent, args.options))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gtospots", description="Validate, repair and commit poker training spots")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def _with_store(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("--store", type=str, default=None, help="Spot store JSON file (default: $GTOSPOTS_STORE)")
        return p

    p = _with_store(sub.add_parser("validate-store", help="Validate every spot in the store"))
    p.set_defaults(func=_cmd_validate_store)

    p = _with_store(sub.add_parser("repair-store", help="Repair pot/sizing drift in failing spots"))
    p.set_defaults(func=_cmd_repair_store)

    p = _with_store(sub.add_parser("validate-spot", help="Validate one spot document"))
    p.add_argument("source", nargs="?", default="-", help="Spot JSON file, or - for stdin")
    p.set_defaults(func=_cmd_validate_spot)

    p = _with_store(sub.add_parser("commit-spot", help="Sanitize, validate and append a spot"))
    p.add_argument("source", nargs="?", default="-", help="Spot JSON file, or - for stdin")
    p.set_defaults(func=_cmd_commit_spot)

    p = _with_store(sub.add_parser("lookup-freq", help="Print fallback action frequencies"))
    p.add_argument("--hand-intent", required=True, choices=get_args(HandIntent))
    p.add_argument("--turn-type", required=True, choices=get_args(TurnType))
    p.add_argument("--node-intent", required=True, choices=get_args(NodeIntent))
    p.add_argument("--options", type=int, required=True, metavar="K", help="Number of options in the menu")
    p.set_defaults(func=_cmd_lookup_freq)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError) as exc:
        _err.print(f"[red]Cannot read input:[/] {exc}")
        return 2
    except StoreError as exc:
        _err.print(f"[red]Store error:[/] {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
