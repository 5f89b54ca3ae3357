"""Game state marshalling and deterministic serialization helpers."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable

from brdgme_cli.plugins.base import GamePlugin
from brdgme_cli.protocol.errors import (
    StateDeserializationFailure,
    StateSerializationFailure,
)


def stable_json_dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def state_hash(obj: Any) -> str:
    return hashlib.sha256(stable_json_dumps(obj).encode("utf-8")).hexdigest()


def to_document(value: Any) -> Any:
    """Normalise an engine value into a plain JSON tree."""
    return json.loads(stable_json_dumps(value))


def unmarshal_game(plugin: Callable[[], GamePlugin], document: Any) -> GamePlugin:
    engine = plugin()
    try:
        engine.load(document)
    except Exception as exc:
        raise StateDeserializationFailure(exc) from exc
    return engine


def marshal_game(engine: GamePlugin) -> Any:
    try:
        return to_document(engine.dump())
    except Exception as exc:
        raise StateSerializationFailure(exc) from exc
