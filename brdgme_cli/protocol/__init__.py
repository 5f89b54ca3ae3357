from brdgme_cli.protocol.errors import (
    CommandExecutionFailure,
    DecodeFailure,
    GameInitializationFailure,
    InternalError,
    InvalidPlayer,
    NoProgressFailure,
    ProtocolError,
    RenderSerializationFailure,
    StateDeserializationFailure,
    StateSerializationFailure,
    UnknownGame,
    UnrecognizedOperation,
    UserError,
)
from brdgme_cli.protocol.models import (
    Request,
    RequestBody,
    ResponseBody,
    encode_response,
)

__all__ = [
    "CommandExecutionFailure",
    "DecodeFailure",
    "GameInitializationFailure",
    "InternalError",
    "InvalidPlayer",
    "NoProgressFailure",
    "ProtocolError",
    "RenderSerializationFailure",
    "Request",
    "RequestBody",
    "ResponseBody",
    "StateDeserializationFailure",
    "StateSerializationFailure",
    "UnknownGame",
    "UnrecognizedOperation",
    "UserError",
    "encode_response",
]
