"""
brdgme_cli.protocol.errors — failure taxonomy
==============================================

Every failure a handler can report derives from ProtocolError. UserError
subclasses mean the caller can retry with different input; InternalError
subclasses point at a defect in the adapter or the engine and are encoded
as SystemError responses.
"""

from __future__ import annotations

from typing import Any


class ProtocolError(Exception):
    """Base exception for all failures that become an error response."""

    response_tag = "SystemError"


class UserError(ProtocolError):
    response_tag = "UserError"


class InternalError(ProtocolError):
    response_tag = "SystemError"


class DecodeFailure(InternalError):
    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(f"Unable to decode request: {detail}")


class UnrecognizedOperation(InternalError):
    def __init__(self) -> None:
        super().__init__("Could not parse command from request")


class UnknownGame(InternalError):
    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game '{game_id}' is not registered")


class StateDeserializationFailure(InternalError):
    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(f"Could not unmarshal game: {detail}")


class StateSerializationFailure(InternalError):
    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(f"Unable to create game response, {detail}")


class RenderSerializationFailure(InternalError):
    """Raised when a public or player state view cannot be serialized."""

    def __init__(self, audience: str, detail: Any):
        self.audience = audience
        self.detail = detail
        super().__init__(f"Unable to serialize {audience} state, {detail}")


class GameInitializationFailure(UserError):
    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(f"Unable to start game, {detail}")


class CommandExecutionFailure(UserError):
    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(f"Command failed, {detail}")


class NoProgressFailure(UserError):
    def __init__(self) -> None:
        super().__init__("No command was executed")


class InvalidPlayer(UserError):
    def __init__(self, player: int, player_count: int):
        self.player = player
        self.player_count = player_count
        super().__init__(
            f"Invalid player {player}, expected 0 to {player_count - 1}"
        )
