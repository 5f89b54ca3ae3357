from __future__ import annotations

import pytest

from brdgme_cli.plugins.base import ActiveStatus, CommandError, CommandResult, Log


class ScriptedEngine:
    """Engine double whose command() replays a fixed list of steps.

    A step is either a CommandResult to return or an exception to raise.
    """

    def __init__(self, steps=()):
        self.steps = list(steps)
        self.calls = []
        self.players = 0
        self.turn = 0

    def player_counts(self):
        return [2, 3, 4]

    def player_count(self):
        return self.players

    def start(self, players):
        if players not in self.player_counts():
            raise CommandError(f"unsupported player count {players}")
        self.players = players
        self.turn = 0
        return [Log("started")]

    def status(self):
        return ActiveStatus(whose_turn={self.turn % self.players})

    def command(self, player, command, names):
        self.calls.append(command)
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        self.turn += 1
        return step

    def pub_state(self):
        return {"turn": self.turn}

    def player_state(self, player):
        return {"turn": self.turn, "player": player}

    def pub_render(self):
        return f"turn {self.turn}"

    def player_render(self, player):
        return f"turn {self.turn} for player {player}"

    def load(self, document):
        self.players = document["players"]
        self.turn = document["turn"]

    def dump(self):
        return {"players": self.players, "turn": self.turn}


@pytest.fixture
def game_document():
    return {"players": 2, "turn": 0}


@pytest.fixture
def make_engine(game_document):
    def factory(*steps):
        engine = ScriptedEngine(steps)
        engine.load(game_document)
        return engine

    return factory


@pytest.fixture
def step():
    def build(remaining="", *messages, can_undo=False):
        return CommandResult(
            logs=[Log(message) for message in messages],
            remaining_command=remaining,
            can_undo=can_undo,
        )

    return build
