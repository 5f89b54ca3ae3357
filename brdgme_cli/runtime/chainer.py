"""Runs a compound command string through an engine one sub-command at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from brdgme_cli.plugins.base import CommandError, GamePlugin, Log
from brdgme_cli.protocol.errors import CommandExecutionFailure, NoProgressFailure


logger = logging.getLogger("brdgme_cli.chainer")


@dataclass
class ChainOutcome:
    logs: List[Log] = field(default_factory=list)
    remaining_command: str = ""
    can_undo: bool = False
    steps: int = 0


def run_commands(
    engine: GamePlugin,
    player: int,
    command: str,
    names: List[str],
) -> ChainOutcome:
    """Feed `command` to the engine until it is consumed or stops making progress.

    Each engine call consumes one sub-command and reports the text it left
    over. The chain stops on the first error, when nothing is left, or when
    the engine hands back the same text it was given. If any sub-command
    succeeded the outcome is a success and the unconsumed tail is returned;
    a failing tail is not reported as an error. Only CommandError counts as
    a failed sub-command; anything else the engine raises propagates.
    """
    remaining = command.strip()
    logs: List[Log] = []
    succeeded = False
    can_undo = False
    steps = 0

    while True:
        steps += 1
        error: Optional[CommandError] = None
        try:
            result = engine.command(player, remaining, names)
        except CommandError as exc:
            error = exc
            next_remaining = remaining
        else:
            next_remaining = result.remaining_command.strip()
            logs.extend(result.logs)
            can_undo = result.can_undo
            succeeded = True

        logger.debug(
            "step %d: player=%d command=%r remaining=%r error=%s",
            steps,
            player,
            remaining,
            next_remaining,
            error,
        )
        if error is not None or next_remaining == "" or next_remaining == remaining:
            break
        remaining = next_remaining

    if succeeded:
        if error is not None:
            logger.info("Ignoring failure after partial success: %s", error)
        return ChainOutcome(
            logs=logs,
            remaining_command=next_remaining,
            can_undo=can_undo,
            steps=steps,
        )
    if error is not None:
        raise CommandExecutionFailure(error) from error
    raise NoProgressFailure()
