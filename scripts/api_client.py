"""Lightweight REST client for the futsal club API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the futsal club REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("notice", type=Path, nargs="?", help="Attendance notice text file")
    parser.add_argument("--teams", type=int, default=3, help="Number of teams to generate")
    parser.add_argument("--title", default=None, help="Session title")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible team generation")
    parser.add_argument("--parse-only", action="store_true", help="Show matched/unknown names without creating a session")
    parser.add_argument("--rankings", metavar="METRIC", help="Print rankings (goals, assists, points) and exit")
    parser.add_argument("--list-sessions", action="store_true", help="List recent sessions and exit")
    args = parser.parse_args()

    if args.rankings or args.list_sessions:
        with httpx.Client(base_url=args.base_url) as client:
            if args.list_sessions:
                resp = client.get("/sessions")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            if args.rankings:
                resp = client.get(f"/rankings/{args.rankings}")
                if resp.status_code == 400:
                    raise SystemExit(resp.json().get("detail", "invalid ranking type"))
                resp.raise_for_status()
                for entry in resp.json()["rankings"]:
                    print(
                        f"{entry['rank']:>2}. {entry['name']} {args.rankings}={entry[args.rankings]} "
                        f"games={entry['games']}"
                    )
        return

    if args.notice is None:
        raise SystemExit("notice file is required unless using --rankings/--list-sessions")

    text = args.notice.read_text(encoding="utf-8")
    with httpx.Client(base_url=args.base_url) as client:
        resp = client.post("/sessions/parse", json={"text": text})
        resp.raise_for_status()
        parsed = resp.json()
        print(f"Date: {parsed['date'] or '-'}; matched {len(parsed['matched'])}/{parsed['count']}")
        if parsed["unknown"]:
            print("Unknown:", ", ".join(parsed["unknown"]))

        if args.parse_only:
            return
        if not parsed["date"]:
            raise SystemExit("notice has no date; cannot create a session")

        resp = client.post(
            "/sessions",
            json={
                "date": parsed["date"],
                "title": args.title,
                "player_ids": [player["player_id"] for player in parsed["matched"]],
            },
        )
        resp.raise_for_status()
        session_id = resp.json()["session_id"]

        resp = client.post(
            f"/sessions/{session_id}/teams/generate",
            json={"num_teams": args.teams, "seed": args.seed},
        )
        if resp.status_code == 400:
            raise SystemExit(resp.json().get("detail", "team generation failed"))
        resp.raise_for_status()
        payload = resp.json()
        for team in payload["teams"]:
            names = ", ".join(player["name"] for player in team["players"])
            print(f"{team['label']} {team['name']} ({team['stats']['total']:.1f}): {names}")
        print(f"Balance score: {payload['balance_score']:.1f}; {payload['matches_created']} matches scheduled")


if __name__ == "__main__":
    main()
