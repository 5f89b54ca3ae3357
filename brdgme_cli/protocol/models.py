
"""Protocol request and response models.

Both directions are externally tagged: a JSON object with a single key naming
the variant, whose value is the variant body. Bodies are separate models so a
decoded request is always exactly one of them.
"""

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    model_serializer,
)


class _Body(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tag: ClassVar[str]


class PlayerCountsRequest(_Body):
    tag: ClassVar[str] = "PlayerCounts"


class NewRequest(_Body):
    tag: ClassVar[str] = "New"

    players: StrictInt


class StatusRequest(_Body):
    tag: ClassVar[str] = "Status"

    game: Any


class PlayRequest(_Body):
    tag: ClassVar[str] = "Play"

    player: StrictInt
    command: StrictStr
    names: List[StrictStr] = Field(default_factory=list)
    game: Any


class PubRenderRequest(_Body):
    tag: ClassVar[str] = "PubRender"

    game: Any


class PlayerRenderRequest(_Body):
    tag: ClassVar[str] = "PlayerRender"

    player: StrictInt
    game: Any


RequestBody = Union[
    PlayerCountsRequest,
    NewRequest,
    StatusRequest,
    PlayRequest,
    PubRenderRequest,
    PlayerRenderRequest,
]


class Request(BaseModel):
    """Incoming request envelope. Unknown top-level keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    player_counts: Optional[PlayerCountsRequest] = Field(default=None, alias="PlayerCounts")
    new: Optional[NewRequest] = Field(default=None, alias="New")
    status: Optional[StatusRequest] = Field(default=None, alias="Status")
    play: Optional[PlayRequest] = Field(default=None, alias="Play")
    pub_render: Optional[PubRenderRequest] = Field(default=None, alias="PubRender")
    player_render: Optional[PlayerRenderRequest] = Field(default=None, alias="PlayerRender")

    def populated(self) -> List[RequestBody]:
        variants = (
            self.player_counts,
            self.new,
            self.status,
            self.play,
            self.pub_render,
            self.player_render,
        )
        return [variant for variant in variants if variant is not None]


class ActiveStatusBody(BaseModel):
    whose_turn: List[int] = Field(default_factory=list)
    eliminated: List[int] = Field(default_factory=list)


class FinishedStatusBody(BaseModel):
    winners: List[int] = Field(default_factory=list)


class GameStatusBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    active: Optional[ActiveStatusBody] = Field(default=None, alias="Active")
    finished: Optional[FinishedStatusBody] = Field(default=None, alias="Finished")

    @model_serializer(mode="wrap")
    def _only_populated(self, handler):
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class GameResponse(BaseModel):
    state: Any
    points: List[float] = Field(default_factory=list)
    status: GameStatusBody


class LogEntry(BaseModel):
    content: str
    at: str
    public: bool
    to: List[int] = Field(default_factory=list)


class PubRenderView(BaseModel):
    pub_state: Any
    render: str


class PlayerRenderView(BaseModel):
    player_state: Any
    render: str
    command_spec: Optional[Dict[str, Any]] = None

    @model_serializer(mode="wrap")
    def _omit_missing_spec(self, handler):
        data = handler(self)
        if self.command_spec is None:
            data.pop("command_spec", None)
        return data


class PlayerCountsResponse(_Body):
    tag: ClassVar[str] = "PlayerCounts"

    player_counts: List[int]


class NewResponse(_Body):
    tag: ClassVar[str] = "New"

    game: GameResponse
    logs: List[LogEntry] = Field(default_factory=list)
    public_render: str
    player_renders: List[str] = Field(default_factory=list)


class StatusResponse(_Body):
    tag: ClassVar[str] = "Status"

    game: GameResponse
    public_render: str
    player_renders: List[str] = Field(default_factory=list)


class PlayResponse(_Body):
    tag: ClassVar[str] = "Play"

    game: GameResponse
    logs: List[LogEntry] = Field(default_factory=list)
    can_undo: bool
    remaining_command: str
    public_render: str
    player_renders: List[str] = Field(default_factory=list)


class PubRenderResponse(_Body):
    tag: ClassVar[str] = "PubRender"

    render: PubRenderView


class PlayerRenderResponse(_Body):
    tag: ClassVar[str] = "PlayerRender"

    render: PlayerRenderView


class UserErrorResponse(_Body):
    tag: ClassVar[str] = "UserError"

    message: str


class SystemErrorResponse(_Body):
    tag: ClassVar[str] = "SystemError"

    message: str


ResponseBody = Union[
    PlayerCountsResponse,
    NewResponse,
    StatusResponse,
    PlayResponse,
    PubRenderResponse,
    PlayerRenderResponse,
    UserErrorResponse,
    SystemErrorResponse,
]


def encode_response(body: ResponseBody) -> Dict[str, Any]:
    return {body.tag: body.model_dump(mode="json", by_alias=True)}
