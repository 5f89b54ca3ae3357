"""Builds response fields from a loaded engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from brdgme_cli.plugins.base import ActiveStatus, GamePlugin, GameStatus, Log
from brdgme_cli.protocol.errors import InvalidPlayer, RenderSerializationFailure
from brdgme_cli.protocol.models import (
    ActiveStatusBody,
    FinishedStatusBody,
    GameResponse,
    GameStatusBody,
    LogEntry,
    PlayerRenderView,
    PubRenderView,
)
from brdgme_cli.runtime.serialization import marshal_game, to_document


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


def check_player(engine: GamePlugin, player: int) -> None:
    player_count = engine.player_count()
    if player not in range(player_count):
        raise InvalidPlayer(player, player_count)


def game_eliminated(engine: GamePlugin) -> Set[int]:
    hook = getattr(engine, "eliminated", None)
    if not callable(hook):
        return set()
    return set(hook() or ())


def status_body(status: GameStatus, eliminated: Iterable[int] = ()) -> GameStatusBody:
    if isinstance(status, ActiveStatus):
        return GameStatusBody(
            active=ActiveStatusBody(
                whose_turn=sorted(status.whose_turn),
                eliminated=sorted(set(status.eliminated) | set(eliminated)),
            )
        )
    return GameStatusBody(finished=FinishedStatusBody(winners=list(status.winners)))


def game_points(engine: GamePlugin) -> List[float]:
    hook = getattr(engine, "points", None)
    if not callable(hook):
        return []
    return [float(points) for points in hook() or []]


def game_response(engine: GamePlugin) -> GameResponse:
    return GameResponse(
        state=marshal_game(engine),
        points=game_points(engine),
        status=status_body(engine.status(), game_eliminated(engine)),
    )


def log_entries(logs: Iterable[Log]) -> List[LogEntry]:
    now = datetime.now(timezone.utc)
    entries = []
    for log in logs:
        at = log.at.astimezone(timezone.utc) if log.at is not None else now
        entries.append(
            LogEntry(
                content=log.message,
                at=at.strftime(TIMESTAMP_FORMAT),
                public=log.public,
                to=list(log.to or []),
            )
        )
    return entries


def player_renders(engine: GamePlugin) -> List[str]:
    return [engine.player_render(player) for player in range(engine.player_count())]


def _serialize_view(audience: str, value: Any) -> Any:
    try:
        return to_document(value)
    except (TypeError, ValueError) as exc:
        raise RenderSerializationFailure(audience, exc) from exc


def public_view(engine: GamePlugin) -> PubRenderView:
    return PubRenderView(
        pub_state=_serialize_view("public", engine.pub_state()),
        render=engine.pub_render(),
    )


def command_spec(engine: GamePlugin, player: int) -> Optional[Dict[str, Any]]:
    hook = getattr(engine, "command_spec", None)
    if not callable(hook):
        return None
    spec = hook(player)
    if spec is None:
        return None
    return _serialize_view("command spec", spec)


def player_view(engine: GamePlugin, player: int) -> PlayerRenderView:
    check_player(engine, player)
    return PlayerRenderView(
        player_state=_serialize_view("player", engine.player_state(player)),
        render=engine.player_render(player),
        command_spec=command_spec(engine, player),
    )
