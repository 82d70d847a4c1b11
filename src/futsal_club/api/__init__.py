"""REST API for the futsal club."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Sequence

from fastapi import FastAPI, HTTPException, Query

from futsal_club.api.schemas import (
    MAX_MATCHES,
    AttendanceRequest,
    ChemistryRequest,
    EventListResponse,
    EventRequest,
    EventResponse,
    MatchResponse,
    ParseRequest,
    ParseResponse,
    PlayerCreateRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    PreferenceRequest,
    RankingListResponse,
    RankingResponse,
    ScheduleResponse,
    ScoreUpdateRequest,
    SessionCreateRequest,
    SessionResponse,
    StoredTeamResponse,
    TeamAssignRequest,
    TeamGenerateRequest,
    TeamGenerateResponse,
    TeamResponse,
    TeamStatsResponse,
)
from futsal_club.balancer import InvalidTeamCount, Team, combine_affinity, generate_teams, player_score
from futsal_club.config import BalancerSettings, load_settings
from futsal_club.ingest import match_attendees, parse_session_text
from futsal_club.models import AffinityEdge, EventType, MatchEvent, PlayerPreference, PlayerProfile
from futsal_club.persistence import ClubStore, EventRecord, MatchRecord, SessionRecord, TeamRecord
from futsal_club.rankings import compute_rankings, top_rankings
from futsal_club.scheduling import Fixture, autofill_fixtures, build_fixtures, name_teams


logger = logging.getLogger("uvicorn.error")

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "futsal_club.sqlite"


def player_to_response(player: PlayerProfile, settings: BalancerSettings) -> PlayerResponse:
    return PlayerResponse(
        player_id=player.player_id,
        name=player.name,
        shooting=player.shooting,
        offball_run=player.offball_run,
        ball_keeping=player.ball_keeping,
        passing=player.passing,
        intercept=player.intercept,
        marking=player.marking,
        stamina=player.stamina,
        speed=player.speed,
        physical_rating=player.physical_rating,
        join_date=player.join_date,
        overall=player_score(player, settings),
    )


def session_to_response(session: SessionRecord) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        date=session.session_date,
        title=session.title,
        pot_total=session.pot_total,
        base_fee=session.base_fee,
        created_at=session.created_at,
        player_ids=session.player_ids,
    )


def match_to_response(match: MatchRecord) -> MatchResponse:
    return MatchResponse(
        match_id=match.match_id,
        session_id=match.session_id,
        match_no=match.match_no,
        team1_id=match.team1_id,
        team2_id=match.team2_id,
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        status=match.status,
        duration_min=match.duration_min,
    )


def event_to_response(event: EventRecord) -> EventResponse:
    return EventResponse(
        event_id=event.event_id,
        type=event.event_type,
        player_id=event.player_id,
        player_name=event.player_name,
        team_id=event.team_id,
        assister_id=event.assister_id,
        assister_name=event.assister_name,
        event_time=event.event_time,
        created_at=event.created_at,
    )


def team_to_response(
    team: Team,
    name: str,
    settings: BalancerSettings,
    team_id: int | None = None,
) -> TeamResponse:
    return TeamResponse(
        team_id=team_id,
        label=team.team_id,
        name=name,
        players=[player_to_response(player, settings) for player in team.players],
        stats=TeamStatsResponse(
            attack=team.stats.attack,
            mid=team.stats.mid,
            defense=team.stats.defense,
            base=team.stats.base,
            physical=team.stats.physical,
            total=team.stats.total,
        ),
    )


def stored_team_to_response(team: TeamRecord) -> StoredTeamResponse:
    return StoredTeamResponse(
        team_id=team.team_id,
        label=team.label,
        name=team.name,
        player_ids=team.player_ids,
    )


def _fixture_rows(fixtures: Sequence[Fixture]) -> list[tuple[int, int, int]]:
    return [(fixture.match_no, fixture.team1_id, fixture.team2_id) for fixture in fixtures]


def _event_from_request(payload: EventRequest) -> MatchEvent:
    try:
        event_type = EventType.parse(payload.type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MatchEvent(
        event_type=event_type,
        player_id=payload.scorer_id,
        team_id=payload.team_id,
        assister_id=payload.assister_id if event_type is EventType.GOAL else None,
        event_time=payload.event_time,
    )


def create_app(db_path: Path | str | None = None) -> FastAPI:
    app = FastAPI(title="futsal club")
    store = ClubStore(db_path or DEFAULT_DB_PATH)
    app.state.store = store

    def _settings() -> BalancerSettings:
        return load_settings()

    def _fetch_session_or_404(session_id: int) -> SessionRecord:
        session = store.get_session(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def _fetch_match_or_404(match_id: int) -> MatchRecord:
        match = store.get_match(match_id)
        if match is None:
            raise HTTPException(status_code=404, detail="Match not found")
        return match

    def _require_match_team(match: MatchRecord, team_id: int) -> None:
        if team_id not in (match.team1_id, match.team2_id):
            raise HTTPException(status_code=400, detail=f"Team {team_id} is not playing match {match.match_id}")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=list[PlayerResponse])
    async def list_players():
        settings = _settings()
        return [player_to_response(player, settings) for player in store.list_players()]

    @app.post("/players", response_model=PlayerResponse)
    async def create_player(payload: PlayerCreateRequest):
        profile = PlayerProfile(player_id=0, **payload.model_dump())
        try:
            created = store.create_player(profile)
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail=f"Player {payload.name!r} already exists") from exc
        return player_to_response(created, _settings())

    @app.get("/players/{player_id}", response_model=PlayerResponse)
    async def get_player(player_id: int):
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_to_response(player, _settings())

    @app.put("/players/{player_id}", response_model=PlayerResponse)
    async def update_player(player_id: int, payload: PlayerUpdateRequest):
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("name", "") is None:
            raise HTTPException(status_code=400, detail="Player name cannot be empty")
        try:
            updated = store.update_player(player_id, **changes)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail=f"Player {changes.get('name')!r} already exists") from exc
        return player_to_response(updated, _settings())

    @app.delete("/players/{player_id}")
    async def delete_player(player_id: int):
        try:
            store.delete_player(player_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        return {"success": True}

    @app.post("/preferences")
    async def set_preference(payload: PreferenceRequest):
        if payload.player_id == payload.target_player_id:
            raise HTTPException(status_code=400, detail="A player cannot prefer themselves")
        try:
            store.set_preference(PlayerPreference(**payload.model_dump()))
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail="Unknown player id") from exc
        return {"success": True}

    @app.post("/chemistry")
    async def add_chemistry(payload: ChemistryRequest):
        try:
            store.add_chemistry_edge(AffinityEdge(**payload.model_dump()))
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail="Unknown player id") from exc
        return {"success": True}

    @app.post("/sessions/parse", response_model=ParseResponse)
    async def parse_session(payload: ParseRequest):
        parsed = parse_session_text(payload.text)
        result = match_attendees(parsed.names, store.list_players())
        settings = _settings()
        return ParseResponse(
            date=parsed.date,
            matched=[player_to_response(player, settings) for player in result.matched],
            unknown=result.unknown,
            count=result.count,
        )

    @app.post("/sessions", response_model=SessionResponse)
    async def create_session(payload: SessionCreateRequest):
        try:
            session = store.create_session(
                session_date=payload.date,
                title=payload.title,
                pot_total=payload.pot_total,
                base_fee=payload.base_fee,
                player_ids=payload.player_ids,
            )
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail="Attendance references an unknown player") from exc
        return session_to_response(session)

    @app.get("/sessions", response_model=list[SessionResponse])
    async def list_sessions(limit: int = 50):
        return [session_to_response(session) for session in store.list_sessions(limit=limit)]

    @app.get("/sessions/{session_id}", response_model=SessionResponse)
    async def get_session(session_id: int):
        return session_to_response(_fetch_session_or_404(session_id))

    @app.put("/sessions/{session_id}/attendance", response_model=SessionResponse)
    async def set_attendance(session_id: int, payload: AttendanceRequest):
        _fetch_session_or_404(session_id)
        try:
            session = store.set_attendance(session_id, payload.player_ids)
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail="Attendance references an unknown player") from exc
        return session_to_response(session)

    @app.delete("/sessions/{session_id}")
    async def delete_session(session_id: int):
        _fetch_session_or_404(session_id)
        store.delete_session(session_id)
        return {"success": True}

    @app.post("/sessions/{session_id}/teams/generate", response_model=TeamGenerateResponse)
    async def generate_session_teams(session_id: int, payload: TeamGenerateRequest):
        _fetch_session_or_404(session_id)
        players = store.session_attendees(session_id)
        if not players:
            raise HTTPException(status_code=400, detail="No players found for this session")

        settings = _settings()
        affinity = combine_affinity(store.list_chemistry_edges(), store.list_preferences())
        try:
            result = generate_teams(
                players,
                payload.num_teams,
                affinity=affinity,
                settings=settings,
                seed=payload.seed,
            )
        except InvalidTeamCount as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        names = name_teams(result.teams)
        team_ids = store.save_teams(
            session_id,
            [
                (team.team_id, name, [int(player.player_id) for player in team.players])
                for team, name in zip(result.teams, names)
            ],
        )
        matches_created = 0
        if len(team_ids) >= 2:
            fixtures = build_fixtures(team_ids, round_robin_fallback=False)
            matches_created = store.add_matches(session_id, _fixture_rows(fixtures))
        logger.info(
            "Session %s: generated %s teams (balance %.1f), %s matches",
            session_id,
            len(team_ids),
            result.balance_score,
            matches_created,
        )
        return TeamGenerateResponse(
            session_id=session_id,
            teams=[
                team_to_response(team, name, settings, team_id)
                for team, name, team_id in zip(result.teams, names, team_ids)
            ],
            balance_score=result.balance_score,
            variance=result.variance,
            logs=list(result.logs),
            matches_created=matches_created,
        )

    @app.get("/sessions/{session_id}/teams", response_model=list[StoredTeamResponse])
    async def list_session_teams(session_id: int):
        _fetch_session_or_404(session_id)
        return [stored_team_to_response(team) for team in store.list_teams(session_id)]

    @app.post("/sessions/{session_id}/teams/assign", response_model=list[StoredTeamResponse])
    async def assign_player(session_id: int, payload: TeamAssignRequest):
        _fetch_session_or_404(session_id)
        try:
            teams = store.assign_player(session_id, payload.player_id, payload.team_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return [stored_team_to_response(team) for team in teams]

    def _team_ids_or_400(session_id: int) -> list[int]:
        _fetch_session_or_404(session_id)
        team_ids = [team.team_id for team in store.list_teams(session_id)]
        if len(team_ids) < 2:
            raise HTTPException(status_code=400, detail="Not enough teams")
        return team_ids

    def _schedule_response(session_id: int, count: int) -> ScheduleResponse:
        return ScheduleResponse(
            session_id=session_id,
            count=count,
            matches=[match_to_response(match) for match in store.list_matches(session_id)],
        )

    @app.post("/sessions/{session_id}/matches/generate", response_model=ScheduleResponse)
    async def generate_matches(session_id: int):
        team_ids = _team_ids_or_400(session_id)
        store.clear_matches(session_id)
        count = store.add_matches(session_id, _fixture_rows(build_fixtures(team_ids)))
        return _schedule_response(session_id, count)

    @app.post("/sessions/{session_id}/matches/autofill", response_model=ScheduleResponse)
    async def autofill_matches(session_id: int, target: int = Query(9, ge=0, le=MAX_MATCHES)):
        team_ids = _team_ids_or_400(session_id)
        existing = len(store.list_matches(session_id))
        fixtures = autofill_fixtures(team_ids, existing, target=target)
        count = store.add_matches(session_id, _fixture_rows(fixtures)) if fixtures else 0
        return _schedule_response(session_id, count)

    @app.delete("/sessions/{session_id}/matches")
    async def clear_matches(session_id: int):
        _fetch_session_or_404(session_id)
        store.clear_matches(session_id)
        return {"success": True}

    @app.get("/sessions/{session_id}/matches", response_model=list[MatchResponse])
    async def list_matches(session_id: int):
        _fetch_session_or_404(session_id)
        return [match_to_response(match) for match in store.list_matches(session_id)]

    @app.delete("/matches/{match_id}")
    async def delete_match(match_id: int):
        _fetch_match_or_404(match_id)
        store.delete_match(match_id)
        return {"success": True}

    @app.put("/matches/{match_id}/score", response_model=MatchResponse)
    async def update_score(match_id: int, payload: ScoreUpdateRequest):
        _fetch_match_or_404(match_id)
        updated = store.set_score(
            match_id,
            team1_score=payload.team1_score,
            team2_score=payload.team2_score,
            status=payload.status,
        )
        return match_to_response(updated)

    @app.post("/matches/{match_id}/events", response_model=MatchResponse)
    async def record_event(match_id: int, payload: EventRequest):
        match = _fetch_match_or_404(match_id)
        _require_match_team(match, payload.team_id)
        event = _event_from_request(payload)
        try:
            updated = store.record_event(match_id, event)
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=400, detail="Event references an unknown player") from exc
        return match_to_response(updated)

    @app.delete("/matches/{match_id}/events", response_model=MatchResponse)
    async def undo_event(match_id: int, payload: EventRequest):
        match = _fetch_match_or_404(match_id)
        _require_match_team(match, payload.team_id)
        updated = store.undo_event(match_id, _event_from_request(payload))
        return match_to_response(updated)

    @app.get("/matches/{match_id}/events", response_model=EventListResponse)
    async def list_events(match_id: int):
        _fetch_match_or_404(match_id)
        return EventListResponse(events=[event_to_response(event) for event in store.list_events(match_id)])

    @app.post("/matches/{match_id}/reset", response_model=MatchResponse)
    async def reset_match(match_id: int):
        _fetch_match_or_404(match_id)
        return match_to_response(store.reset_match(match_id))

    @app.get("/rankings/{metric}", response_model=RankingListResponse)
    async def rankings(metric: str, limit: int = 10):
        players, totals, members, matches = store.ranking_inputs()
        entries = compute_rankings(players, totals, members, matches)
        try:
            top = top_rankings(entries, metric, limit=limit)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return RankingListResponse(
            metric=metric,
            rankings=[
                RankingResponse(
                    rank=entry.rank,
                    player_id=entry.player_id,
                    name=entry.name,
                    goals=entry.goals,
                    assists=entry.assists,
                    points=entry.points,
                    games=entry.games,
                )
                for entry in top
            ],
        )

    return app
