"""Game engine contract for brdgme-cli.

Engines are mutable objects: the adapter builds a fresh instance per request,
loads the request's game document into it, drives it, and dumps it again.
Engines never see the protocol envelope. Rule violations and unparseable
commands are reported by raising CommandError; any other exception is
treated as a defect in the engine.

Engines may also provide `eliminated() -> Set[int]`, `points() -> List[float]`
and `command_spec(player) -> Optional[dict]`; these are looked up with getattr.
Eliminated players are merged into an active status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Protocol, Set, Union


@dataclass
class Log:
    message: str
    public: bool = True
    to: List[int] = field(default_factory=list)
    at: Optional[datetime] = None


@dataclass
class CommandResult:
    logs: List[Log] = field(default_factory=list)
    remaining_command: str = ""
    can_undo: bool = False


@dataclass(frozen=True)
class ActiveStatus:
    whose_turn: Set[int] = field(default_factory=set)
    eliminated: Set[int] = field(default_factory=set)


@dataclass(frozen=True)
class FinishedStatus:
    winners: List[int] = field(default_factory=list)


GameStatus = Union[ActiveStatus, FinishedStatus]


class CommandError(ValueError):
    """Raised by engines when a command cannot be parsed or is against the rules."""


class GamePlugin(Protocol):
    def player_counts(self) -> List[int]:
        ...

    def player_count(self) -> int:
        ...

    def start(self, players: int) -> List[Log]:
        ...

    def status(self) -> GameStatus:
        ...

    def command(self, player: int, command: str, names: List[str]) -> CommandResult:
        ...

    def pub_state(self) -> Any:
        ...

    def player_state(self, player: int) -> Any:
        ...

    def pub_render(self) -> str:
        ...

    def player_render(self, player: int) -> str:
        ...

    def load(self, document: Any) -> None:
        ...

    def dump(self) -> Any:
        ...

