"""Persistence layer for players, sessions, generated teams and match records."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from futsal_club.models import (
    SKILL_FIELDS,
    AffinityEdge,
    EventType,
    MatchEvent,
    PlayerPreference,
    PlayerProfile,
)


_PLAYER_COLUMNS: Tuple[str, ...] = (
    *SKILL_FIELDS,
    "physical_rating",
    "height_cm",
    "weight_kg",
    "join_date",
)

_STAT_COLUMNS = {
    EventType.KEY_PASS: "key_passes",
    EventType.DEFENSE: "blocks",
    EventType.CLEARANCE: "clearances",
}


@dataclass
class SessionRecord:
    session_id: int
    session_date: str
    title: Optional[str]
    pot_total: Optional[int]
    base_fee: Optional[int]
    created_at: datetime
    player_ids: List[int]


@dataclass
class TeamRecord:
    team_id: int
    session_id: int
    label: str
    name: str
    player_ids: List[int]


@dataclass
class MatchRecord:
    match_id: int
    session_id: int
    match_no: int
    team1_id: int
    team2_id: int
    team1_score: int
    team2_score: int
    status: str
    duration_min: Optional[int]


@dataclass
class EventRecord:
    event_id: int
    match_id: int
    event_type: str
    player_id: int
    player_name: str
    team_id: int
    assister_id: Optional[int]
    assister_name: Optional[str]
    event_time: int
    created_at: datetime


class ClubStore:
    """SQLite-backed store for the club's sessions, teams and match records."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv("FUTSAL_DB_PATH")
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                shooting INTEGER,
                offball_run INTEGER,
                ball_keeping INTEGER,
                passing INTEGER,
                intercept INTEGER,
                marking INTEGER,
                stamina INTEGER,
                speed INTEGER,
                physical_rating INTEGER,
                height_cm REAL,
                weight_kg REAL,
                join_date TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_date TEXT NOT NULL,
                title TEXT,
                pot_total INTEGER,
                base_fee INTEGER,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS attendance (
                session_id INTEGER NOT NULL REFERENCES sessions(id),
                player_id INTEGER NOT NULL REFERENCES players(id),
                PRIMARY KEY (session_id, player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_preferences (
                player_id INTEGER NOT NULL REFERENCES players(id),
                target_player_id INTEGER NOT NULL REFERENCES players(id),
                rank INTEGER NOT NULL,
                PRIMARY KEY (player_id, target_player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS chemistry_edges (
                player_a_id INTEGER NOT NULL REFERENCES players(id),
                player_b_id INTEGER NOT NULL REFERENCES players(id),
                score REAL NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS teams (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id INTEGER NOT NULL REFERENCES sessions(id),
                label TEXT NOT NULL,
                name TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS team_members (
                team_id INTEGER NOT NULL REFERENCES teams(id),
                player_id INTEGER NOT NULL REFERENCES players(id),
                PRIMARY KEY (team_id, player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id INTEGER NOT NULL REFERENCES sessions(id),
                match_no INTEGER NOT NULL,
                team1_id INTEGER NOT NULL REFERENCES teams(id),
                team2_id INTEGER NOT NULL REFERENCES teams(id),
                team1_score INTEGER NOT NULL DEFAULT 0,
                team2_score INTEGER NOT NULL DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'pending',
                duration_min INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS match_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                match_id INTEGER NOT NULL REFERENCES matches(id),
                player_id INTEGER NOT NULL REFERENCES players(id),
                team_id INTEGER NOT NULL,
                event_type TEXT NOT NULL,
                assister_id INTEGER,
                event_time INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_match_stats (
                player_id INTEGER NOT NULL REFERENCES players(id),
                match_id INTEGER NOT NULL REFERENCES matches(id),
                goals INTEGER NOT NULL DEFAULT 0,
                assists INTEGER NOT NULL DEFAULT 0,
                key_passes INTEGER NOT NULL DEFAULT 0,
                blocks INTEGER NOT NULL DEFAULT 0,
                clearances INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (player_id, match_id)
            )
            """
        )
        conn.commit()

    # Players

    def create_player(self, profile: PlayerProfile) -> PlayerProfile:
        values = [getattr(profile, column) for column in _PLAYER_COLUMNS]
        placeholders = ", ".join("?" for _ in _PLAYER_COLUMNS)
        with self._connect() as conn:
            cursor = conn.execute(
                f"INSERT INTO players (name, {', '.join(_PLAYER_COLUMNS)}) VALUES (?, {placeholders})",
                (profile.name, *values),
            )
            player_id = cursor.lastrowid
            conn.commit()
        created = self.get_player(int(player_id))
        if created is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after insert")
        return created

    def update_player(self, player_id: int, **changes: object) -> PlayerProfile:
        allowed = {"name", *_PLAYER_COLUMNS}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown player fields: {', '.join(sorted(unknown))}")
        if self.get_player(player_id) is None:
            raise KeyError(f"Player {player_id} not found")
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            with self._connect() as conn:
                conn.execute(
                    f"UPDATE players SET {assignments} WHERE id = ?",
                    (*changes.values(), player_id),
                )
                conn.commit()
        updated = self.get_player(player_id)
        if updated is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after update")
        return updated

    def get_player(self, player_id: int) -> Optional[PlayerProfile]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_profile(row)

    def list_players(self) -> List[PlayerProfile]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY name").fetchall()
        return [self._row_to_profile(row) for row in rows]

    def delete_player(self, player_id: int) -> None:
        """Remove a player with their attendance, memberships, links and match stats.

        Match scores already recorded are left as they are.
        """

        if self.get_player(player_id) is None:
            raise KeyError(f"Player {player_id} not found")
        with self._connect() as conn:
            conn.execute("DELETE FROM match_events WHERE player_id = ?", (player_id,))
            conn.execute("UPDATE match_events SET assister_id = NULL WHERE assister_id = ?", (player_id,))
            conn.execute("DELETE FROM player_match_stats WHERE player_id = ?", (player_id,))
            conn.execute("DELETE FROM team_members WHERE player_id = ?", (player_id,))
            conn.execute("DELETE FROM attendance WHERE player_id = ?", (player_id,))
            conn.execute(
                "DELETE FROM player_preferences WHERE player_id = ? OR target_player_id = ?",
                (player_id, player_id),
            )
            conn.execute(
                "DELETE FROM chemistry_edges WHERE player_a_id = ? OR player_b_id = ?",
                (player_id, player_id),
            )
            conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()

    # Preferences / chemistry

    def set_preference(self, preference: PlayerPreference) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO player_preferences (player_id, target_player_id, rank) VALUES (?, ?, ?)
                ON CONFLICT(player_id, target_player_id) DO UPDATE SET rank = excluded.rank
                """,
                (preference.player_id, preference.target_player_id, preference.rank),
            )
            conn.commit()

    def list_preferences(self) -> List[PlayerPreference]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT player_id, target_player_id, rank FROM player_preferences"
            ).fetchall()
        return [
            PlayerPreference(
                player_id=row["player_id"],
                target_player_id=row["target_player_id"],
                rank=row["rank"],
            )
            for row in rows
        ]

    def add_chemistry_edge(self, edge: AffinityEdge) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO chemistry_edges (player_a_id, player_b_id, score) VALUES (?, ?, ?)",
                (edge.player_a_id, edge.player_b_id, edge.score),
            )
            conn.commit()

    def list_chemistry_edges(self) -> List[AffinityEdge]:
        with self._connect() as conn:
            rows = conn.execute("SELECT player_a_id, player_b_id, score FROM chemistry_edges").fetchall()
        return [
            AffinityEdge(player_a_id=row["player_a_id"], player_b_id=row["player_b_id"], score=row["score"])
            for row in rows
        ]

    # Sessions

    def create_session(
        self,
        *,
        session_date: str,
        title: Optional[str] = None,
        pot_total: Optional[int] = None,
        base_fee: Optional[int] = None,
        player_ids: Iterable[int] = (),
        created_at: Optional[datetime] = None,
    ) -> SessionRecord:
        created_at = created_at or datetime.now(timezone.utc)
        unique_ids = list(dict.fromkeys(player_ids))
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO sessions (session_date, title, pot_total, base_fee, created_at) VALUES (?, ?, ?, ?, ?)",
                (session_date, title, pot_total, base_fee, created_at.isoformat()),
            )
            session_id = int(cursor.lastrowid)
            conn.executemany(
                "INSERT INTO attendance (session_id, player_id) VALUES (?, ?)",
                [(session_id, pid) for pid in unique_ids],
            )
            conn.commit()
        session = self.get_session(session_id)
        if session is None:  # pragma: no cover
            raise KeyError(f"Session {session_id} not found after insert")
        return session

    def get_session(self, session_id: int) -> Optional[SessionRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM sessions WHERE id = ?", (session_id,)).fetchone()
            if row is None:
                return None
            player_ids = [
                r["player_id"]
                for r in conn.execute(
                    "SELECT player_id FROM attendance WHERE session_id = ? ORDER BY rowid",
                    (session_id,),
                ).fetchall()
            ]
        return self._row_to_session(row, player_ids)

    def list_sessions(self, limit: int = 50) -> List[SessionRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id FROM sessions ORDER BY session_date DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        sessions = [self.get_session(row["id"]) for row in rows]
        return [session for session in sessions if session is not None]

    def session_attendees(self, session_id: int) -> List[PlayerProfile]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT p.* FROM players p
                JOIN attendance a ON p.id = a.player_id
                WHERE a.session_id = ?
                ORDER BY a.rowid
                """,
                (session_id,),
            ).fetchall()
        return [self._row_to_profile(row) for row in rows]

    def set_attendance(self, session_id: int, player_ids: Iterable[int]) -> SessionRecord:
        """Overwrite the attendee list; generated teams are kept."""

        if self.get_session(session_id) is None:
            raise KeyError(f"Session {session_id} not found")
        unique_ids = list(dict.fromkeys(player_ids))
        with self._connect() as conn:
            conn.execute("DELETE FROM attendance WHERE session_id = ?", (session_id,))
            conn.executemany(
                "INSERT INTO attendance (session_id, player_id) VALUES (?, ?)",
                [(session_id, pid) for pid in unique_ids],
            )
            conn.commit()
        session = self.get_session(session_id)
        if session is None:  # pragma: no cover
            raise KeyError(f"Session {session_id} not found after update")
        return session

    def delete_session(self, session_id: int) -> None:
        if self.get_session(session_id) is None:
            raise KeyError(f"Session {session_id} not found")
        with self._connect() as conn:
            self._clear_session_teams(conn, session_id)
            conn.execute("DELETE FROM attendance WHERE session_id = ?", (session_id,))
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            conn.commit()

    # Teams

    def save_teams(
        self,
        session_id: int,
        teams: Sequence[Tuple[str, str, Sequence[int]]],
    ) -> List[int]:
        """Replace the session's teams with ``(label, name, player_ids)`` entries.

        Matches, events and per-match stats of the session are cleared too.
        Player ids with no ``players`` row are dropped.
        """

        if self.get_session(session_id) is None:
            raise KeyError(f"Session {session_id} not found")
        team_ids: List[int] = []
        with self._connect() as conn:
            self._clear_session_teams(conn, session_id)
            known = {row["id"] for row in conn.execute("SELECT id FROM players").fetchall()}
            for label, name, player_ids in teams:
                cursor = conn.execute(
                    "INSERT INTO teams (session_id, label, name) VALUES (?, ?, ?)",
                    (session_id, label, name),
                )
                team_id = int(cursor.lastrowid)
                team_ids.append(team_id)
                conn.executemany(
                    "INSERT INTO team_members (team_id, player_id) VALUES (?, ?)",
                    [(team_id, pid) for pid in player_ids if pid in known],
                )
            conn.commit()
        return team_ids

    def _clear_session_teams(self, conn: sqlite3.Connection, session_id: int) -> None:
        match_filter = "SELECT id FROM matches WHERE session_id = ?"
        conn.execute(f"DELETE FROM player_match_stats WHERE match_id IN ({match_filter})", (session_id,))
        conn.execute(f"DELETE FROM match_events WHERE match_id IN ({match_filter})", (session_id,))
        conn.execute("DELETE FROM matches WHERE session_id = ?", (session_id,))
        conn.execute(
            "DELETE FROM team_members WHERE team_id IN (SELECT id FROM teams WHERE session_id = ?)",
            (session_id,),
        )
        conn.execute("DELETE FROM teams WHERE session_id = ?", (session_id,))

    def list_teams(self, session_id: int) -> List[TeamRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM teams WHERE session_id = ? ORDER BY id",
                (session_id,),
            ).fetchall()
            members = conn.execute(
                """
                SELECT tm.team_id, tm.player_id FROM team_members tm
                JOIN teams t ON t.id = tm.team_id
                WHERE t.session_id = ?
                ORDER BY tm.rowid
                """,
                (session_id,),
            ).fetchall()
        by_team: dict[int, List[int]] = {}
        for member in members:
            by_team.setdefault(member["team_id"], []).append(member["player_id"])
        return [
            TeamRecord(
                team_id=row["id"],
                session_id=row["session_id"],
                label=row["label"],
                name=row["name"],
                player_ids=by_team.get(row["id"], []),
            )
            for row in rows
        ]

    def assign_player(self, session_id: int, player_id: int, team_id: Optional[int]) -> List[TeamRecord]:
        """Move ``player_id`` to ``team_id`` within the session, or off every team when ``None``."""

        if self.get_session(session_id) is None:
            raise KeyError(f"Session {session_id} not found")
        if self.get_player(player_id) is None:
            raise KeyError(f"Player {player_id} not found")
        with self._connect() as conn:
            session_teams = {
                row["id"]
                for row in conn.execute("SELECT id FROM teams WHERE session_id = ?", (session_id,)).fetchall()
            }
            if team_id is not None and team_id not in session_teams:
                raise ValueError(f"Team {team_id} does not belong to session {session_id}")
            conn.execute(
                "DELETE FROM team_members WHERE player_id = ? "
                "AND team_id IN (SELECT id FROM teams WHERE session_id = ?)",
                (player_id, session_id),
            )
            if team_id is not None:
                conn.execute(
                    "INSERT INTO team_members (team_id, player_id) VALUES (?, ?)",
                    (team_id, player_id),
                )
            conn.commit()
        return self.list_teams(session_id)

    # Matches

    def add_matches(
        self,
        session_id: int,
        fixtures: Iterable[Tuple[int, int, int]],
        *,
        duration_min: Optional[int] = None,
    ) -> int:
        """Insert ``(match_no, team1_id, team2_id)`` rows; returns the count."""

        rows = [(session_id, no, t1, t2, duration_min) for no, t1, t2 in fixtures]
        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO matches (session_id, match_no, team1_id, team2_id, duration_min) VALUES (?, ?, ?, ?, ?)",
                rows,
            )
            conn.commit()
        return len(rows)

    def clear_matches(self, session_id: int) -> None:
        with self._connect() as conn:
            match_filter = "SELECT id FROM matches WHERE session_id = ?"
            conn.execute(f"DELETE FROM player_match_stats WHERE match_id IN ({match_filter})", (session_id,))
            conn.execute(f"DELETE FROM match_events WHERE match_id IN ({match_filter})", (session_id,))
            conn.execute("DELETE FROM matches WHERE session_id = ?", (session_id,))
            conn.commit()

    def list_matches(self, session_id: int) -> List[MatchRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM matches WHERE session_id = ? ORDER BY match_no, id",
                (session_id,),
            ).fetchall()
        return [self._row_to_match(row) for row in rows]

    def get_match(self, match_id: int) -> Optional[MatchRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM matches WHERE id = ?", (match_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_match(row)

    def set_score(
        self,
        match_id: int,
        *,
        team1_score: int,
        team2_score: int,
        status: Optional[str] = None,
    ) -> MatchRecord:
        self._require_match(match_id)
        with self._connect() as conn:
            if status is None:
                conn.execute(
                    "UPDATE matches SET team1_score = ?, team2_score = ? WHERE id = ?",
                    (team1_score, team2_score, match_id),
                )
            else:
                conn.execute(
                    "UPDATE matches SET team1_score = ?, team2_score = ?, status = ? WHERE id = ?",
                    (team1_score, team2_score, status, match_id),
                )
            conn.commit()
        return self._require_match(match_id)

    def record_event(self, match_id: int, event: MatchEvent) -> MatchRecord:
        """Apply ``event`` to the score sheet and keep it in the event log."""

        self._require_match(match_id)
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            if event.event_type is EventType.GOAL:
                conn.execute(
                    """
                    UPDATE matches
                    SET team1_score = CASE WHEN team1_id = ? THEN team1_score + 1 ELSE team1_score END,
                        team2_score = CASE WHEN team2_id = ? THEN team2_score + 1 ELSE team2_score END,
                        status = 'completed'
                    WHERE id = ?
                    """,
                    (event.team_id, event.team_id, match_id),
                )
                self._bump_stat(conn, event.player_id, match_id, "goals")
                if event.assister_id is not None:
                    self._bump_stat(conn, event.assister_id, match_id, "assists")
                assister_id = event.assister_id
            else:
                self._bump_stat(conn, event.player_id, match_id, _STAT_COLUMNS[event.event_type])
                assister_id = None
            conn.execute(
                """
                INSERT INTO match_events (match_id, player_id, team_id, event_type, assister_id, event_time, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    match_id,
                    event.player_id,
                    event.team_id,
                    event.event_type.value,
                    assister_id,
                    event.event_time,
                    now,
                ),
            )
            conn.commit()
        return self._require_match(match_id)

    def undo_event(self, match_id: int, event: MatchEvent) -> MatchRecord:
        """Roll back the counters ``event`` added; values never drop below zero."""

        self._require_match(match_id)
        with self._connect() as conn:
            if event.event_type is EventType.GOAL:
                conn.execute(
                    """
                    UPDATE matches
                    SET team1_score = CASE WHEN team1_id = ? THEN MAX(0, team1_score - 1) ELSE team1_score END,
                        team2_score = CASE WHEN team2_id = ? THEN MAX(0, team2_score - 1) ELSE team2_score END
                    WHERE id = ?
                    """,
                    (event.team_id, event.team_id, match_id),
                )
                self._drop_stat(conn, event.player_id, match_id, "goals")
                if event.assister_id is not None:
                    self._drop_stat(conn, event.assister_id, match_id, "assists")
            else:
                self._drop_stat(conn, event.player_id, match_id, _STAT_COLUMNS[event.event_type])
            conn.commit()
        return self._require_match(match_id)

    def list_events(self, match_id: int) -> List[EventRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT me.*, p.name AS player_name, a.name AS assister_name
                FROM match_events me
                JOIN players p ON p.id = me.player_id
                LEFT JOIN players a ON a.id = me.assister_id
                WHERE me.match_id = ?
                ORDER BY me.created_at ASC, me.id ASC
                """,
                (match_id,),
            ).fetchall()
        return [
            EventRecord(
                event_id=row["id"],
                match_id=row["match_id"],
                event_type=row["event_type"],
                player_id=row["player_id"],
                player_name=row["player_name"],
                team_id=row["team_id"],
                assister_id=row["assister_id"],
                assister_name=row["assister_name"],
                event_time=row["event_time"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    def reset_match(self, match_id: int) -> MatchRecord:
        self._require_match(match_id)
        with self._connect() as conn:
            conn.execute(
                "UPDATE matches SET team1_score = 0, team2_score = 0, status = 'pending' WHERE id = ?",
                (match_id,),
            )
            conn.execute("DELETE FROM player_match_stats WHERE match_id = ?", (match_id,))
            conn.execute("DELETE FROM match_events WHERE match_id = ?", (match_id,))
            conn.commit()
        return self._require_match(match_id)

    def delete_match(self, match_id: int) -> None:
        self._require_match(match_id)
        with self._connect() as conn:
            conn.execute("DELETE FROM match_events WHERE match_id = ?", (match_id,))
            conn.execute("DELETE FROM player_match_stats WHERE match_id = ?", (match_id,))
            conn.execute("DELETE FROM matches WHERE id = ?", (match_id,))
            conn.commit()

    def _require_match(self, match_id: int) -> MatchRecord:
        match = self.get_match(match_id)
        if match is None:
            raise KeyError(f"Match {match_id} not found")
        return match

    @staticmethod
    def _bump_stat(conn: sqlite3.Connection, player_id: object, match_id: int, column: str) -> None:
        conn.execute(
            f"""
            INSERT INTO player_match_stats (player_id, match_id, {column}) VALUES (?, ?, 1)
            ON CONFLICT(player_id, match_id) DO UPDATE SET {column} = {column} + 1
            """,
            (player_id, match_id),
        )

    @staticmethod
    def _drop_stat(conn: sqlite3.Connection, player_id: object, match_id: int, column: str) -> None:
        conn.execute(
            f"UPDATE player_match_stats SET {column} = MAX(0, {column} - 1) WHERE player_id = ? AND match_id = ?",
            (player_id, match_id),
        )

    # Rankings inputs

    def ranking_inputs(
        self,
    ) -> Tuple[
        List[Tuple[int, str]],
        Mapping[int, Tuple[int, int]],
        List[Tuple[int, int]],
        List[Tuple[int, int]],
    ]:
        """Rows needed by :func:`futsal_club.rankings.compute_rankings`."""

        with self._connect() as conn:
            players = [
                (row["id"], row["name"])
                for row in conn.execute("SELECT id, name FROM players").fetchall()
            ]
            totals = {
                row["player_id"]: (row["goals"] or 0, row["assists"] or 0)
                for row in conn.execute(
                    "SELECT player_id, SUM(goals) AS goals, SUM(assists) AS assists "
                    "FROM player_match_stats GROUP BY player_id"
                ).fetchall()
            }
            members = [
                (row["team_id"], row["player_id"])
                for row in conn.execute("SELECT team_id, player_id FROM team_members").fetchall()
            ]
            matches = [
                (row["team1_id"], row["team2_id"])
                for row in conn.execute("SELECT team1_id, team2_id FROM matches").fetchall()
            ]
        return players, totals, members, matches

    # Row mapping

    def _row_to_profile(self, row: sqlite3.Row) -> PlayerProfile:
        return PlayerProfile(
            player_id=row["id"],
            name=row["name"],
            **{column: row[column] for column in _PLAYER_COLUMNS},
        )

    def _row_to_session(self, row: sqlite3.Row, player_ids: List[int]) -> SessionRecord:
        return SessionRecord(
            session_id=row["id"],
            session_date=row["session_date"],
            title=row["title"],
            pot_total=row["pot_total"],
            base_fee=row["base_fee"],
            created_at=datetime.fromisoformat(row["created_at"]),
            player_ids=player_ids,
        )

    def _row_to_match(self, row: sqlite3.Row) -> MatchRecord:
        return MatchRecord(
            match_id=row["id"],
            session_id=row["session_id"],
            match_no=row["match_no"],
            team1_id=row["team1_id"],
            team2_id=row["team2_id"],
            team1_score=row["team1_score"],
            team2_score=row["team2_score"],
            status=row["status"],
            duration_min=row["duration_min"],
        )
