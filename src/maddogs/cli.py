"""Command-line interface for the team stats dashboard."""

from __future__ import annotations

import argparse
import asyncio
import csv
from pathlib import Path
from typing import Sequence

from maddogs.config import TABLE_COLUMNS, get_metric, is_metric, load_settings
from maddogs.controller import DashboardController
from maddogs.errors import DeleteError, InsertError, ValidationError
from maddogs.gateway import PlayersGateway, RestPlayersGateway
from maddogs.models import DerivedPlayerStats, PlayerInput


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record player stats and rank the team")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List players with derived stats")
    list_parser.add_argument("--sort", default=None, help="Metric to sort by, highest first (default: ops)")
    list_parser.add_argument("--output", type=Path, default=None, help="Also write the table to this CSV path")

    add_parser = subparsers.add_parser("add", help="Add a player")
    add_parser.add_argument("--name", required=True, help="Player name")
    for field, help_text in (
        ("pa", "Plate appearances"),
        ("hits", "Hits"),
        ("double", "Doubles"),
        ("triple", "Triples"),
        ("homerun", "Home runs"),
        ("walks", "Walks"),
        ("sb", "Stolen bases"),
        ("sb-fail", "Failed steal attempts"),
    ):
        add_parser.add_argument(f"--{field}", type=int, default=0, help=help_text)

    delete_parser = subparsers.add_parser("delete", help="Delete a player by id")
    delete_parser.add_argument("player_id", type=int, help="Player id")
    delete_parser.add_argument("--yes", action="store_true", help="Confirm the deletion")

    serve_parser = subparsers.add_parser("serve", help="Run the web dashboard")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _format_row(player: DerivedPlayerStats) -> list[str]:
    return [str(player.id), player.name] + [
        get_metric(key).format(getattr(player, key)) for key in TABLE_COLUMNS
    ]


def _print_table(players: list[DerivedPlayerStats]) -> None:
    header = ["ID", "Player"] + [get_metric(key).label for key in TABLE_COLUMNS]
    rows = [_format_row(player) for player in players]
    widths = [max(len(row[i]) for row in [header, *rows]) for i in range(len(header))]
    for row in [header, *rows]:
        print("  ".join(cell.rjust(width) if i > 1 else cell.ljust(width) for i, (cell, width) in enumerate(zip(row, widths))))


def _write_csv(path: Path, players: list[DerivedPlayerStats]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "name", *TABLE_COLUMNS])
        for player in players:
            writer.writerow([player.id, player.name, *(getattr(player, key) for key in TABLE_COLUMNS)])


async def _run(args: argparse.Namespace, gateway: PlayersGateway) -> int:
    controller = DashboardController(gateway)

    if args.command == "list":
        sort_key = args.sort or load_settings().default_sort
        if not is_metric(sort_key):
            raise SystemExit(f"Unknown sort key: {sort_key}")
        if not await controller.refresh():
            raise SystemExit(f"Could not load players: {controller.last_error}")
        players = controller.sorted_players(sort_key)
        _print_table(players)
        if args.output:
            _write_csv(args.output, players)
            print(f"Wrote {len(players)} players to {args.output}")
        return 0

    if args.command == "add":
        player = PlayerInput(
            name=args.name,
            pa=args.pa,
            hits=args.hits,
            double=args.double,
            triple=args.triple,
            homerun=args.homerun,
            walks=args.walks,
            sb=args.sb,
            sb_fail=args.sb_fail,
        )
        try:
            await controller.insert(player)
        except ValidationError as exc:
            raise SystemExit(exc.message) from exc
        except InsertError as exc:
            raise SystemExit(f"Save failed: {exc.message}") from exc
        print(f"Saved {args.name}")
        return 0

    if args.command == "delete":
        if not args.yes:
            raise SystemExit("Refusing to delete without --yes (this cannot be undone)")
        try:
            await controller.delete(args.player_id, confirmed=True)
        except DeleteError as exc:
            raise SystemExit(exc.message) from exc
        print(f"Deleted player {args.player_id}")
        return 0

    raise SystemExit(f"Unknown command: {args.command}")


async def _run_with_rest_gateway(args: argparse.Namespace) -> int:
    async with RestPlayersGateway.from_settings(load_settings()) as gateway:
        return await _run(args, gateway)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.command == "serve":
        import uvicorn

        from maddogs.api import create_app

        uvicorn.run(create_app(), host=args.host, port=args.port)
        return

    asyncio.run(_run_with_rest_gateway(args))


if __name__ == "__main__":
    main()
