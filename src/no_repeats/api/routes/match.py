"""REST endpoints driving the match lifecycle."""

import threading
from typing import Annotated, Literal, Union

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from no_repeats.config import get_database_path
from no_repeats.errors import (
    BattletagAlreadyExists,
    InvalidStateError,
    MatchNotFound,
    NoRepeatsError,
)
from no_repeats.models.battletag import BattleTag
from no_repeats.models.commands import (
    EnterBattleTag,
    Exit,
    OpenDatabase,
    RecordBattletag,
    RemoveFromRoster,
    RosterPlay,
    RoundRecord,
    RoundSelectHero,
    RoundSelectPlayer,
    RoundToggleOutcome,
)
from no_repeats.models.hero import Hero
from no_repeats.models.match import Match
from no_repeats.models.player import PlayerSlot
from no_repeats.models.round import Round
from no_repeats.services.match_controller import MatchController

MAX_MATCHES_LIMIT = 100

router = APIRouter(prefix="/api", tags=["match"])


def _get_controller(request: Request) -> tuple[MatchController, threading.Lock]:
    """Fetch the controller and the lock serializing access to it."""
    return request.app.state.controller, request.app.state.controller_lock


# === Command bodies ===


class OpenDatabaseBody(BaseModel):
    """Open the configured store; the path is never taken from the client."""

    type: Literal["open_database"]

    def to_command(self):
        return OpenDatabase(path=get_database_path())


class RecordBattletagBody(BaseModel):
    type: Literal["record_battletag"]
    text: str

    def to_command(self):
        return RecordBattletag(text=self.text)


class EnterBattleTagBody(BaseModel):
    type: Literal["enter_battletag"]

    def to_command(self):
        return EnterBattleTag()


class RemoveFromRosterBody(BaseModel):
    type: Literal["remove_from_roster"]
    slot: PlayerSlot

    def to_command(self):
        return RemoveFromRoster(slot=self.slot)


class RosterPlayBody(BaseModel):
    type: Literal["roster_play"]

    def to_command(self):
        return RosterPlay()


class RoundSelectPlayerBody(BaseModel):
    type: Literal["round_select_player"]
    slot: PlayerSlot

    def to_command(self):
        return RoundSelectPlayer(slot=self.slot)


class RoundSelectHeroBody(BaseModel):
    type: Literal["round_select_hero"]
    hero: Hero

    def to_command(self):
        return RoundSelectHero(hero=self.hero)


class RoundToggleOutcomeBody(BaseModel):
    type: Literal["round_toggle_outcome"]

    def to_command(self):
        return RoundToggleOutcome()


class RoundRecordBody(BaseModel):
    type: Literal["round_record"]

    def to_command(self):
        return RoundRecord()


class ExitBody(BaseModel):
    type: Literal["exit"]

    def to_command(self):
        return Exit()


CommandBody = Annotated[
    Union[
        OpenDatabaseBody,
        RecordBattletagBody,
        EnterBattleTagBody,
        RemoveFromRosterBody,
        RosterPlayBody,
        RoundSelectPlayerBody,
        RoundSelectHeroBody,
        RoundToggleOutcomeBody,
        RoundRecordBody,
        ExitBody,
    ],
    Field(discriminator="type"),
]


class CommandBatchRequest(BaseModel):
    """Commands produced by one UI refresh, applied in order."""

    commands: list[CommandBody]


class RegisterBattletagRequest(BaseModel):
    name: str


# === Serialization ===


def _hero_value(hero: Hero | None) -> str | None:
    return hero.value if hero is not None else None


def _serialize_round(round_: Round) -> dict:
    return {
        "win": round_.win,
        "players": [
            {
                "slot": slot.value,
                "battletag": str(round_.get_player(slot)[0]),
                "hero": round_.get_hero(slot).value,
            }
            for slot in PlayerSlot.iter()
        ],
    }


def _serialize_match(match: Match) -> dict:
    wins, losses = match.score
    outcome = match.match_outcome()
    return {
        "rounds": [_serialize_round(r) for r in match],
        "score": {"wins": wins, "losses": losses},
        "outcome": None if outcome is None else ("win" if outcome else "loss"),
        "used_heroes": sorted(h.value for h in match.used_heroes()),
    }


def _serialize_state(controller: MatchController) -> dict:
    load_error = controller.load_error
    response = {
        "phase": controller.phase.value,
        "load_status": controller.load_status.value if controller.load_status else None,
        "load_error": load_error.to_dict() if load_error else None,
        "roster": None,
        "match": None,
        "last_match": _serialize_match(controller.last_match) if controller.last_match else None,
        "last_match_id": controller.last_match_id,
    }

    roster_state = controller.roster_state
    if roster_state is not None:
        response["roster"] = {
            "battletag": roster_state.battletag,
            "roster": [str(b) for b in roster_state.roster],
            "ready_to_play": roster_state.ready_to_play,
        }

    match_state = controller.match_state
    if match_state is not None:
        win = match_state.get_win()
        response["match"] = {
            "selected_player": match_state.selected_player.value,
            "players": [
                {
                    "slot": slot.value,
                    "battletag": str(match_state.get_battletag(slot)),
                    "hero": _hero_value(match_state.get_hero(slot)),
                }
                for slot in PlayerSlot.iter()
            ],
            "win": win,
            "valid": match_state.validate(),
            **_serialize_match(match_state.history),
        }

    return response


# === Endpoints ===


@router.get("/state")
def get_state(request: Request):
    """Snapshot of everything the UI displays."""
    controller, lock = _get_controller(request)
    with lock:
        return _serialize_state(controller)


@router.post("/commands")
def apply_commands(request: Request, body: CommandBatchRequest):
    """Apply a batch of commands one at a time."""
    controller, lock = _get_controller(request)
    commands = [c.to_command() for c in body.commands]
    with lock:
        try:
            errors = controller.apply_all(commands)
        except InvalidStateError as e:
            # Earlier commands in the batch already took effect
            raise HTTPException(
                status_code=409,
                detail={
                    "message": str(e),
                    "applied": e.applied,
                    "errors": [err.to_dict() for err in e.errors],
                    "state": _serialize_state(controller),
                },
            )

        return {
            "applied": len(commands),
            "errors": [e.to_dict() for e in errors],
            "state": _serialize_state(controller),
        }


@router.get("/heroes")
def list_heroes(request: Request):
    """Hero catalog with availability for the current pick."""
    controller, lock = _get_controller(request)
    with lock:
        match_state = controller.match_state
        return {
            "heroes": [
                {
                    "hero": hero.value,
                    "name": hero.display_name,
                    "role": hero.role.value,
                    "used": match_state.is_used(hero) if match_state else False,
                    "available": match_state.is_available(hero) if match_state else True,
                }
                for hero in Hero
            ]
        }


@router.get("/battletags")
def search_battletags(request: Request, search: str = ""):
    """Registered battletags containing the search text."""
    controller, lock = _get_controller(request)
    with lock:
        try:
            results = controller.search_battletags(search)
        except NoRepeatsError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())
    return {"battletags": [str(b) for b in results]}


@router.post("/battletags", status_code=201)
def register_battletag(request: Request, body: RegisterBattletagRequest):
    """Register a new battletag."""
    controller, lock = _get_controller(request)
    try:
        battletag = BattleTag(body.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    with lock:
        store = controller.store
        if store is None:
            raise HTTPException(status_code=409, detail="Database is not open")
        try:
            battletag_id = store.record_battletag(battletag)
        except BattletagAlreadyExists as e:
            raise HTTPException(status_code=409, detail=e.to_dict())
        except NoRepeatsError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())

    return {"id": battletag_id, "name": str(battletag)}


@router.get("/matches")
def list_matches(
    request: Request,
    limit: Annotated[int, Query(ge=1, le=MAX_MATCHES_LIMIT)] = 20,
):
    """Recorded matches, newest first."""
    controller, lock = _get_controller(request)
    with lock:
        store = controller.store
        if store is None:
            raise HTTPException(status_code=409, detail="Database is not open")
        summaries = store.list_matches(limit=limit)

    return {
        "matches": [
            {
                "id": s.id,
                "timestamp": s.timestamp.isoformat() if s.timestamp else None,
                "wins": s.wins,
                "losses": s.losses,
                "battletags": [str(b) for b in s.battletags],
            }
            for s in summaries
        ]
    }


@router.get("/matches/{match_id}")
def get_match(request: Request, match_id: int):
    """A recorded match with all of its rounds."""
    controller, lock = _get_controller(request)
    with lock:
        store = controller.store
        if store is None:
            raise HTTPException(status_code=409, detail="Database is not open")
        try:
            match = store.load_match(match_id)
        except MatchNotFound as e:
            raise HTTPException(status_code=404, detail=e.to_dict())

    return {"id": match_id, **_serialize_match(match)}
