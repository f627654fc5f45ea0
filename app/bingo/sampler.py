# app/bingo/sampler.py
# Deterministic weighted prompt selection without replacement.
#
# Randomness: random.Random (MT19937) seeded with the first 8 bytes (big
# endian) of sha256("<seed>-reroll-<discriminator>"). Only Random.random() is
# consumed, so any MT19937 port with the same seeding reproduces the draws.

from __future__ import annotations

import hashlib
import logging
import math
import random
from typing import Iterable, List, Optional, Sequence, Set, Union

from app.bingo.prompts import CATEGORIES, Category, Prompt

log = logging.getLogger(__name__)

BOARD_SIZE = 16
MAX_DRAW_ATTEMPTS = 8


def rng_for(seed: str, discriminator: Union[int, str]) -> random.Random:
    """Stable per-(seed, discriminator) generator."""
    h = hashlib.sha256(f"{seed}-reroll-{discriminator}".encode("utf-8")).digest()
    return random.Random(int.from_bytes(h[:8], "big"))


def _pick(rng: random.Random, items: Sequence[Prompt]) -> Prompt:
    return items[min(int(math.floor(rng.random() * len(items))), len(items) - 1)]


def _draw(rng: random.Random, exclude: Set[str], categories: Sequence[Category]) -> Optional[Prompt]:
    available = [[p for p in c.source if p.id not in exclude] for c in categories]
    total_weight = sum(c.weight for c, avail in zip(categories, available) if avail)
    if total_weight <= 0:
        return None

    for _ in range(MAX_DRAW_ATTEMPTS):
        target = rng.random() * total_weight
        running = 0
        for category, avail in zip(categories, available):
            if not avail:
                continue
            running += category.weight
            if target < running:
                return _pick(rng, avail)
    return None


def sample_prompt(
    seed: str,
    reroll_index: int,
    exclude: Iterable[str] = (),
    categories: Sequence[Category] = CATEGORIES,
) -> Prompt:
    """
    Pick one prompt whose id is not in `exclude`.

    Category is chosen by weight among categories that still have something
    available, then a prompt uniformly within it. If the exclusion set covers
    the whole catalog we fall back to a uniform pick over everything.
    """
    exclude_set = set(exclude)
    rng = rng_for(seed, reroll_index)
    chosen = _draw(rng, exclude_set, categories)
    if chosen is not None:
        return chosen

    everything = [p for c in categories for p in c.source]
    if not everything:
        raise ValueError("prompt catalog is empty")
    log.warning("prompt catalog exhausted (seed=%s reroll=%s excluded=%d); unrestricted pick",
                seed, reroll_index, len(exclude_set))
    return _pick(rng, everything)


def shuffled(prompts: Sequence[Prompt], seed: str) -> List[Prompt]:
    """Fisher-Yates over a copy, driven by the seed family's 'shuffle' stream."""
    rng = rng_for(seed, "shuffle")
    out = list(prompts)
    for i in range(len(out) - 1, 0, -1):
        j = int(math.floor(rng.random() * (i + 1)))
        out[i], out[j] = out[j], out[i]
    return out


def generate_board(seed: str, size: int = BOARD_SIZE, categories: Sequence[Category] = CATEGORIES) -> List[Prompt]:
    board: List[Prompt] = []
    taken: Set[str] = set()
    for i in range(size):
        prompt = sample_prompt(seed, i, taken, categories)
        board.append(prompt)
        taken.add(prompt.id)
    return shuffled(board, seed)


def generate_replacement(
    seed: str,
    reroll_count: int,
    board_ids: Iterable[str],
    categories: Sequence[Category] = CATEGORIES,
) -> Prompt:
    """One new prompt for a cleared cell; the caller bumps reroll_count afterwards."""
    return sample_prompt(seed, reroll_count, board_ids, categories)
