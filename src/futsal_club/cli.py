"""Command-line interface for splitting a roster into balanced teams."""

from __future__ import annotations

import argparse
import csv
from pathlib import Path

from futsal_club.balancer import InvalidTeamCount, generate_teams, player_score
from futsal_club.config import load_settings
from futsal_club.ingest import load_profiles_from_csv, match_attendees, parse_session_text
from futsal_club.scheduling import build_fixtures, name_teams


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split futsal attendees into balanced teams")
    parser.add_argument("roster", type=Path, help="Path to player roster CSV")
    parser.add_argument("--teams", type=int, default=3, help="Number of teams to build")
    parser.add_argument(
        "--attendance",
        type=Path,
        default=None,
        help="Optional attendance notice text; only listed players are balanced",
    )
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., name=Player Name)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible swaps")
    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Swap attempts during optimisation (default from FUTSAL_BALANCER_ITERATIONS or 1000)",
    )
    parser.add_argument(
        "--chemistry-weight",
        type=float,
        default=None,
        help="Weight of pairwise chemistry in the swap objective (default 0)",
    )
    parser.add_argument("--output", type=Path, default=Path("teams.csv"), help="Output CSV path")
    parser.add_argument("--verbose", action="store_true", help="Print every accepted swap")
    return parser.parse_args()


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def main() -> None:
    args = _parse_args()

    players = load_profiles_from_csv(args.roster, mapping=_parse_mapping(args.column) or None)
    print(f"Loaded {len(players)} players from {args.roster}")

    if args.attendance:
        parsed = parse_session_text(args.attendance.read_text(encoding="utf-8"))
        roster = match_attendees(parsed.names, players)
        players = roster.matched
        print(f"Session {parsed.date or '(no date)'}: {len(roster.matched)}/{roster.count} attendees matched")
        if roster.unknown:
            preview = ", ".join(roster.unknown[:5])
            more = len(roster.unknown) - 5
            suffix = f", +{more} more" if more > 0 else ""
            print(f"Unknown names: {preview}{suffix}")

    settings = load_settings()
    overrides: dict[str, object] = {}
    if args.iterations is not None:
        overrides["iterations"] = max(0, args.iterations)
    if args.chemistry_weight is not None:
        overrides["chemistry_weight"] = max(0.0, args.chemistry_weight)
    if overrides:
        settings = settings.with_overrides(**overrides)

    try:
        result = generate_teams(players, args.teams, settings=settings, seed=args.seed)
    except InvalidTeamCount as exc:
        raise SystemExit(str(exc)) from exc

    if args.verbose:
        for line in result.logs:
            print(line)

    names = name_teams(result.teams)
    with args.output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["team", "team_name", "player_id", "name", "overall"])
        for team, name in zip(result.teams, names):
            for player in team.players:
                writer.writerow([
                    team.team_id,
                    name,
                    player.player_id,
                    player.name,
                    f"{player_score(player, settings):.1f}",
                ])

    for team, name in zip(result.teams, names):
        members = ", ".join(player.name for player in team.players) or "-"
        print(f"{team.team_id} {name} (total {team.stats.total:.1f}): {members}")
    print(f"Balance score: {result.balance_score:.1f} (spread {result.variance:.2f})")

    if len(result.teams) >= 2:
        labels = [team.team_id for team in result.teams]
        fixtures = build_fixtures(list(range(len(labels))))
        print("Fixtures: " + ", ".join(
            f"{labels[f.team1_id]}-{labels[f.team2_id]}" for f in fixtures
        ))
    print(f"Wrote assignments to {args.output}")


if __name__ == "__main__":
    main()
