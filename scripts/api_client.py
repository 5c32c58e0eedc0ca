"""Lightweight REST client for a running dashboard's JSON API."""

from __future__ import annotations

import argparse
import json

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the Mad Dogs dashboard API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--sort", default="ops", help="Metric to sort the player list by")
    parser.add_argument("--leaders", action="store_true", help="Show the leader per card metric and exit")
    parser.add_argument("--add", metavar="JSON", help="Add a player from a JSON object of counting stats")
    parser.add_argument("--delete", metavar="PLAYER_ID", type=int, help="Delete a player (asks for confirmation)")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.leaders:
            resp = client.get("/players/leaders")
            resp.raise_for_status()
            for key, player in resp.json()["leaders"].items():
                print(f"{key}: {player['name']} ({player[key]})")
            return

        if args.add:
            try:
                payload = json.loads(args.add)
            except json.JSONDecodeError as exc:
                raise SystemExit(f"Invalid player JSON: {exc}") from exc
            resp = client.post("/players", json=payload)
            if resp.status_code in (400, 409, 502):
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            print(f"Saved {resp.json()['name']}")

        if args.delete is not None:
            answer = input(f"Delete player {args.delete}? This cannot be undone. [y/N] ")
            if answer.strip().lower() != "y":
                raise SystemExit("Aborted")
            resp = client.delete(f"/players/{args.delete}", params={"confirm": "true"})
            if resp.status_code in (409, 502):
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            print(f"Deleted player {args.delete}")

        resp = client.get("/players", params={"sort": args.sort})
        if resp.status_code == 400:
            raise SystemExit(resp.json()["detail"])
        resp.raise_for_status()
        payload = resp.json()
        if payload.get("error"):
            print(f"Warning: showing stale data ({payload['error']})")
        print(json.dumps(payload["team"], indent=2))
        for player in payload["players"]:
            print(f"{player['id']:>4}  {player['name']:<20} {args.sort}={player[args.sort]}")


if __name__ == "__main__":
    main()
