"""Two player Tic-Tac-Toe engine driven by text commands."""

from __future__ import annotations

import re
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr

from brdgme_cli.plugins.base import (
    ActiveStatus,
    CommandError,
    CommandResult,
    FinishedStatus,
    GameStatus,
    Log,
)


Board = List[List[str]]

MARKS = ("X", "O")
EMPTY = " "
COLUMNS = "abc"
SEPARATORS = " \t\r\n;"

_TOKEN = re.compile(r"[\s;]*([^\s;]+)")


class LastMove(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player: StrictInt
    x: StrictInt
    y: StrictInt


class TicTacToeState(BaseModel):
    model_config = ConfigDict(extra="forbid")

    board: List[List[StrictStr]]
    next_player: StrictInt
    finished: StrictBool
    winner: Optional[StrictInt] = None
    last_move: Optional[LastMove] = None


class Plugin:
    def __init__(self) -> None:
        self._state: Optional[TicTacToeState] = None

    @property
    def state(self) -> TicTacToeState:
        if self._state is None:
            raise RuntimeError("Game has not been started or loaded")
        return self._state

    def player_counts(self) -> List[int]:
        return [2]

    def player_count(self) -> int:
        return len(MARKS)

    def start(self, players: int) -> List[Log]:
        if players not in self.player_counts():
            raise CommandError(f"Tic-Tac-Toe is for exactly 2 players, not {players}")
        self._state = TicTacToeState(
            board=[[EMPTY] * 3 for _ in range(3)],
            next_player=0,
            finished=False,
        )
        return [Log(f"The game has started, {MARKS[0]} goes first")]

    def load(self, document: Any) -> None:
        state = TicTacToeState.model_validate(document)
        if len(state.board) != 3 or any(len(row) != 3 for row in state.board):
            raise ValueError("board must be 3x3")
        if any(cell not in MARKS + (EMPTY,) for row in state.board for cell in row):
            raise ValueError("board cells must be 'X', 'O' or ' '")
        players = range(len(MARKS))
        if state.next_player not in players:
            raise ValueError(f"next_player out of range: {state.next_player}")
        if state.winner is not None and state.winner not in players:
            raise ValueError(f"winner out of range: {state.winner}")
        last_move = state.last_move
        if last_move is not None and (
            last_move.player not in players
            or last_move.x not in range(3)
            or last_move.y not in range(3)
        ):
            raise ValueError(f"last_move out of range: {last_move.model_dump()}")
        self._state = state

    def dump(self) -> Dict[str, Any]:
        return self.state.model_dump()

    def status(self) -> GameStatus:
        state = self.state
        if state.finished:
            winners = [] if state.winner is None else [state.winner]
            return FinishedStatus(winners=winners)
        return ActiveStatus(whose_turn={state.next_player})

    def points(self) -> List[float]:
        state = self.state
        if not state.finished:
            return [0.0, 0.0]
        if state.winner is None:
            return [0.5, 0.5]
        return [1.0 if player == state.winner else 0.0 for player in range(len(MARKS))]

    def command(self, player: int, command: str, names: List[str]) -> CommandResult:
        state = self.state
        if state.finished:
            raise CommandError("The game is already over")

        verb, rest = _next_token(command)
        if verb is None:
            raise CommandError("No command given")
        verb = verb.lower()

        if verb == "play":
            cell, rest = _next_token(rest)
            if cell is None:
                raise CommandError("Play requires a cell, such as b2")
            return CommandResult(
                logs=self._play(player, cell, names),
                remaining_command=rest,
                can_undo=not self.state.finished,
            )
        if verb == "undo":
            return CommandResult(logs=self._undo(player, names), remaining_command=rest)
        if verb == "concede":
            return CommandResult(logs=self._concede(player, names), remaining_command=rest)
        raise CommandError(f"Unknown command '{verb}'")

    def _play(self, player: int, cell: str, names: List[str]) -> List[Log]:
        state = self.state
        if state.next_player != player:
            raise CommandError("It is not your turn")
        x, y = _parse_cell(cell)
        if state.board[y][x] != EMPTY:
            raise CommandError(f"{cell} is already taken")

        next_state = deepcopy(state)
        next_state.board[y][x] = MARKS[player]
        next_state.last_move = LastMove(player=player, x=x, y=y)
        logs = [Log(f"{_player_name(names, player)} played {_cell_name(x, y)}")]

        winner = _winner_for_board(next_state.board)
        if winner is not None:
            next_state.finished = True
            next_state.winner = winner
            logs.append(Log(f"{_player_name(names, winner)} wins with three in a row"))
        elif _board_full(next_state.board):
            next_state.finished = True
            logs.append(Log("The board is full, the game is a draw"))
        else:
            next_state.next_player = _opponent(player)

        self._state = next_state
        return logs

    def _undo(self, player: int, names: List[str]) -> List[Log]:
        state = self.state
        last_move = state.last_move
        if last_move is None or last_move.player != player:
            raise CommandError("You have no move to undo")

        next_state = deepcopy(state)
        next_state.board[last_move.y][last_move.x] = EMPTY
        next_state.next_player = player
        next_state.last_move = None
        self._state = next_state
        return [
            Log(
                f"{_player_name(names, player)} took back "
                f"{_cell_name(last_move.x, last_move.y)}"
            )
        ]

    def _concede(self, player: int, names: List[str]) -> List[Log]:
        next_state = deepcopy(self.state)
        next_state.finished = True
        next_state.winner = _opponent(player)
        self._state = next_state
        return [Log(f"{_player_name(names, player)} conceded")]

    def pub_state(self) -> Dict[str, Any]:
        state = self.state
        return {
            "board": deepcopy(state.board),
            "next_player": state.next_player,
            "finished": state.finished,
            "winner": state.winner,
        }

    def player_state(self, player: int) -> Dict[str, Any]:
        view = self.pub_state()
        view["player"] = player
        view["mark"] = MARKS[player]
        return view

    def pub_render(self) -> str:
        return f"{_render_board(self.state.board)}\n\n{self._status_line()}"

    def player_render(self, player: int) -> str:
        lines = [f"You are {MARKS[player]}.", "", _render_board(self.state.board), ""]
        if not self.state.finished and self.state.next_player == player:
            lines.append("It is your turn.")
        else:
            lines.append(self._status_line())
        return "\n".join(lines)

    def command_spec(self, player: int) -> Optional[Dict[str, Any]]:
        state = self.state
        if state.finished:
            return None

        commands: List[Dict[str, Any]] = []
        if state.next_player == player:
            commands.append(
                {
                    "name": "play",
                    "args": [{"name": "cell", "options": _open_cells(state.board)}],
                }
            )
        if state.last_move is not None and state.last_move.player == player:
            commands.append({"name": "undo", "args": []})
        commands.append({"name": "concede", "args": []})
        return {"commands": commands}

    def _status_line(self) -> str:
        state = self.state
        if not state.finished:
            return f"Waiting on {MARKS[state.next_player]}."
        if state.winner is None:
            return "The game was a draw."
        return f"{MARKS[state.winner]} won."


def _next_token(text: str) -> Tuple[Optional[str], str]:
    match = _TOKEN.match(text)
    if match is None:
        return None, text
    return match.group(1), text[match.end():].lstrip(SEPARATORS)


def _parse_cell(cell: str) -> Tuple[int, int]:
    cell = cell.lower()
    if len(cell) != 2 or cell[0] not in COLUMNS or cell[1] not in "123":
        raise CommandError(f"'{cell}' is not a cell, use a1 to c3")
    return COLUMNS.index(cell[0]), int(cell[1]) - 1


def _cell_name(x: int, y: int) -> str:
    return f"{COLUMNS[x]}{y + 1}"


def _player_name(names: List[str], player: int) -> str:
    if player < len(names) and names[player]:
        return names[player]
    return MARKS[player]


def _opponent(player: int) -> int:
    return (player + 1) % len(MARKS)


def _render_board(board: Board) -> str:
    header = "  " + "   ".join(COLUMNS)
    rows = [f"{index + 1} " + " | ".join(row) for index, row in enumerate(board)]
    return "\n".join([header] + rows)


def _lines(board: Board) -> Iterable[List[str]]:
    for row in board:
        yield row
    for column_index in range(3):
        yield [board[row_index][column_index] for row_index in range(3)]
    yield [board[0][0], board[1][1], board[2][2]]
    yield [board[0][2], board[1][1], board[2][0]]


def _winner_for_board(board: Board) -> Optional[int]:
    for line in _lines(board):
        for player, mark in enumerate(MARKS):
            if all(cell == mark for cell in line):
                return player
    return None


def _board_full(board: Board) -> bool:
    return all(cell != EMPTY for row in board for cell in row)


def _open_cells(board: Board) -> List[str]:
    return [_cell_name(x, y) for y in range(3) for x in range(3) if board[y][x] == EMPTY]
