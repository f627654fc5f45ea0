from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.bingo.prompts import Prompt, prompt_for_id
from app.records import MovieRecord
from app.bingo.sampler import generate_board, generate_replacement
from app.utils.money import parse_money

MAX_GUESSES = 10
MAX_LOGGED_STARS = 6

STATUS_PLAYING = "playing"
STATUS_GAME_OVER = "gameOver"


class GameError(Exception):
    code = "game_error"
    status = 400


class GameOverError(GameError):
    code = "game_over"
    status = 409


class DuplicateGuessError(GameError):
    code = "already_guessed"
    status = 409


@dataclass
class FilledBy:
    movie_id: str
    title: str
    poster_url: Optional[str] = None


@dataclass
class Cell:
    prompt: Prompt
    filled_by: Optional[FilledBy] = None


@dataclass
class GameState:
    seed: str
    cells: List[Cell]
    reroll_count: int = 0
    guesses_left: int = MAX_GUESSES
    score: int = 0
    status: str = STATUS_PLAYING
    logs: List[Dict[str, Any]] = field(default_factory=list)

    def board_ids(self) -> List[str]:
        return [c.prompt.id for c in self.cells]

    def guessed_ids(self) -> set:
        return {str(entry.get("id")) for entry in self.logs}

    @property
    def is_over(self) -> bool:
        return self.status == STATUS_GAME_OVER


@dataclass
class Replacement:
    index: int
    old_id: str
    new_id: str
    reroll_index: int


def new_game(seed: str, prompts: Optional[List[Prompt]] = None, max_guesses: int = MAX_GUESSES) -> GameState:
    prompts = list(prompts) if prompts is not None else generate_board(seed)
    if len({p.id for p in prompts}) != len(prompts):
        raise ValueError("board contains duplicate prompt ids")
    return GameState(seed=seed, cells=[Cell(p) for p in prompts], guesses_left=max_guesses)


def _money_or_none(value: Any) -> Optional[float]:
    n = parse_money(value)
    return None if math.isnan(n) else n


def _log_entry(movie_id: str, title: str, movie: MovieRecord, satisfied: List[Prompt]) -> Dict[str, Any]:
    return {
        "id": movie_id,
        "title": title,
        "year": movie.release_year(),
        "runtime": movie.runtime,
        "genres": list(movie.genres or ()),
        "directors": [p.name for p in movie.directors()],
        "writers": [p.name for p in movie.writers()],
        "stars": [p.name for p in movie.cast()][:MAX_LOGGED_STARS],
        "posterUrl": movie.poster_url,
        "timestamp": int(time.time() * 1000),
        "language": movie.original_language,
        "budget": _money_or_none(movie.budget),
        "boxOffice": _money_or_none(movie.box_office),
        "awards": [
            {"id": f"{movie_id}-award-{i}", "name": a.name, "isWinner": a.is_winner}
            for i, a in enumerate(movie.awards or ())
        ],
        "clearedPrompts": [p.label for p in satisfied],
        "score": len(satisfied),
    }


def apply_guess(state: GameState, movie_id: str, title: Optional[str], movie: MovieRecord) -> List[Prompt]:
    """
    Check one guessed movie against every open cell.

    Satisfied cells are marked filled (not yet replaced), the score grows by
    one per cell and a guess is spent. Returns the satisfied prompts.
    """
    movie_id = str(movie_id)
    if state.is_over:
        raise GameOverError("No guesses left today.")
    if movie_id in state.guessed_ids():
        raise DuplicateGuessError("That movie was already guessed.")

    title = (title or movie.name or "").strip()
    satisfied: List[Prompt] = []
    for cell in state.cells:
        if cell.filled_by is not None:
            continue
        if cell.prompt.check(movie, title):
            satisfied.append(cell.prompt)
            cell.filled_by = FilledBy(movie_id=movie_id, title=title, poster_url=movie.poster_url)

    state.score += len(satisfied)
    state.guesses_left = max(0, state.guesses_left - 1)
    state.logs.insert(0, _log_entry(movie_id, title, movie, satisfied))
    if state.guesses_left <= 0:
        state.status = STATUS_GAME_OVER
    return satisfied


def replace_cell(state: GameState, index: int) -> Replacement:
    """Swap one cell's prompt for a fresh draw; the old prompt stays excluded for this draw."""
    old = state.cells[index].prompt
    reroll_index = state.reroll_count
    new = generate_replacement(state.seed, reroll_index, state.board_ids())
    state.reroll_count += 1
    state.cells[index] = Cell(new)
    return Replacement(index=index, old_id=old.id, new_id=new.id, reroll_index=reroll_index)


def clear_filled(state: GameState) -> List[Replacement]:
    """Replace every filled cell, strictly one at a time in board order."""
    return [replace_cell(state, i) for i, cell in enumerate(state.cells) if cell.filled_by is not None]


# --------------------------------------------------------------------
# Persistence
# --------------------------------------------------------------------

def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "seed": state.seed,
        "rerollCount": state.reroll_count,
        "guessesLeft": state.guesses_left,
        "score": state.score,
        "gameState": state.status,
        "logs": list(state.logs),
        "cells": [
            {
                "prompt": c.prompt.to_public(),
                "filledBy": (
                    {"id": c.filled_by.movie_id, "title": c.filled_by.title, "posterUrl": c.filled_by.poster_url}
                    if c.filled_by else None
                ),
            }
            for c in state.cells
        ],
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    cells = []
    for raw in data.get("cells") or []:
        p = raw.get("prompt") or {}
        filled = raw.get("filledBy")
        cells.append(Cell(
            prompt=prompt_for_id(str(p.get("id") or ""), p.get("label")),
            filled_by=FilledBy(str(filled.get("id")), filled.get("title") or "", filled.get("posterUrl")) if filled else None,
        ))
    if not cells:
        raise ValueError("saved board has no cells")
    return GameState(
        seed=str(data["seed"]),
        cells=cells,
        reroll_count=int(data.get("rerollCount") or 0),
        guesses_left=int(data.get("guessesLeft", MAX_GUESSES)),
        score=int(data.get("score") or 0),
        status=data.get("gameState") or STATUS_PLAYING,
        logs=list(data.get("logs") or []),
    )
