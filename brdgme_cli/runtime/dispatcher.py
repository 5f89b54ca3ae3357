
"""Single-shot request dispatcher."""

from __future__ import annotations

import json
import logging
from typing import IO, Any, Callable, Dict

from pydantic import ValidationError

from brdgme_cli.plugins.base import CommandError, GamePlugin
from brdgme_cli.protocol.errors import (
    DecodeFailure,
    GameInitializationFailure,
    ProtocolError,
    UnrecognizedOperation,
    UserError,
)
from brdgme_cli.protocol.models import (
    NewRequest,
    NewResponse,
    PlayerCountsRequest,
    PlayerCountsResponse,
    PlayerRenderRequest,
    PlayerRenderResponse,
    PlayRequest,
    PlayResponse,
    PubRenderRequest,
    PubRenderResponse,
    Request,
    RequestBody,
    ResponseBody,
    StatusRequest,
    StatusResponse,
    SystemErrorResponse,
    UserErrorResponse,
    encode_response,
)
from brdgme_cli.runtime import projector
from brdgme_cli.runtime.chainer import run_commands
from brdgme_cli.runtime.serialization import state_hash, unmarshal_game


logger = logging.getLogger("brdgme_cli.dispatcher")


def decode_request(raw_request: Any) -> RequestBody:
    try:
        request = Request.model_validate(raw_request)
    except ValidationError as exc:
        raise DecodeFailure(exc) from exc

    populated = request.populated()
    if len(populated) != 1:
        raise UnrecognizedOperation()
    return populated[0]


def error_response(exc: ProtocolError) -> ResponseBody:
    if isinstance(exc, UserError):
        return UserErrorResponse(message=str(exc))
    return SystemErrorResponse(message=str(exc))


class Dispatcher:
    def __init__(self, plugin: Callable[[], GamePlugin]):
        self.plugin = plugin
        self._handlers: Dict[type, Callable[[Any], ResponseBody]] = {
            PlayerCountsRequest: self._player_counts,
            NewRequest: self._new,
            StatusRequest: self._status,
            PlayRequest: self._play,
            PubRenderRequest: self._pub_render,
            PlayerRenderRequest: self._player_render,
        }

    def _player_counts(self, request: PlayerCountsRequest) -> ResponseBody:
        return PlayerCountsResponse(player_counts=list(self.plugin().player_counts()))

    def _new(self, request: NewRequest) -> ResponseBody:
        engine = self.plugin()
        try:
            logs = engine.start(request.players)
        except CommandError as exc:
            # Most likely an unsupported player count.
            raise GameInitializationFailure(exc) from exc

        return NewResponse(
            game=projector.game_response(engine),
            logs=projector.log_entries(logs),
            public_render=engine.pub_render(),
            player_renders=projector.player_renders(engine),
        )

    def _status(self, request: StatusRequest) -> ResponseBody:
        engine = unmarshal_game(self.plugin, request.game)
        return StatusResponse(
            game=projector.game_response(engine),
            public_render=engine.pub_render(),
            player_renders=projector.player_renders(engine),
        )

    def _play(self, request: PlayRequest) -> ResponseBody:
        engine = unmarshal_game(self.plugin, request.game)
        projector.check_player(engine, request.player)

        outcome = run_commands(engine, request.player, request.command, request.names)
        game = projector.game_response(engine)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "play: player=%d steps=%d pre_hash=%s post_hash=%s",
                request.player,
                outcome.steps,
                state_hash(request.game),
                state_hash(game.state),
            )
        return PlayResponse(
            game=game,
            logs=projector.log_entries(outcome.logs),
            can_undo=outcome.can_undo,
            remaining_command=outcome.remaining_command,
            public_render=engine.pub_render(),
            player_renders=projector.player_renders(engine),
        )

    def _pub_render(self, request: PubRenderRequest) -> ResponseBody:
        engine = unmarshal_game(self.plugin, request.game)
        return PubRenderResponse(render=projector.public_view(engine))

    def _player_render(self, request: PlayerRenderRequest) -> ResponseBody:
        engine = unmarshal_game(self.plugin, request.game)
        return PlayerRenderResponse(render=projector.player_view(engine, request.player))

    def handle(self, raw_request: Any) -> ResponseBody:
        body = decode_request(raw_request)
        logger.debug("dispatching %s request", body.tag)
        return self._handlers[type(body)](body)

    def dispatch(self, raw_request: Any) -> Dict[str, Any]:
        try:
            response = self.handle(raw_request)
        except ProtocolError as exc:
            logger.info("%s: %s", exc.response_tag, exc)
            response = error_response(exc)
        except Exception as exc:
            logger.exception("Unhandled failure while dispatching request")
            response = SystemErrorResponse(message=f"Unexpected failure: {exc}")
        return encode_response(response)

    def dispatch_text(self, text: str) -> Dict[str, Any]:
        try:
            raw_request, _ = json.JSONDecoder().raw_decode(text.lstrip())
        except (ValueError, RecursionError) as exc:
            return encode_response(error_response(DecodeFailure(exc)))
        return self.dispatch(raw_request)


def write_response(response: Dict[str, Any], stream_out: IO[str]) -> None:
    stream_out.write(json.dumps(response, ensure_ascii=False))
    stream_out.write("\n")
    stream_out.flush()


def serve(plugin: Callable[[], GamePlugin], stream_in: IO[str], stream_out: IO[str]) -> None:
    """Read one request from `stream_in` and write one response to `stream_out`."""
    response = Dispatcher(plugin).dispatch_text(stream_in.read())
    write_response(response, stream_out)
