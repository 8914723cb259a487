# src/lodegen/rng.py
# Seeded Mulberry32 stream. Same seed -> same sequence on every platform.

import random
from dataclasses import dataclass
from typing import List, MutableSequence, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

M32 = 0xFFFFFFFF
GOLDEN = 0x6D2B79F5
TWO_32 = 4294967296.0

SEED_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # no 0/O, 1/I
SEED_CODE_LEN = 6

Seed = Union[int, str]


def imul(a: int, b: int) -> int:
    # 32-bit wrapping multiply (unsigned view)
    return (a * b) & M32


def hash_string(text: str) -> int:
    """31-multiplier hash over UTF-16 code units, folded to |signed 32-bit|."""
    h = 0
    raw = text.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = ((h << 5) - h + unit) & M32
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


def seed_to_state(seed: Seed) -> int:
    if isinstance(seed, str):
        return hash_string(seed) & M32
    return int(seed) & M32


def level_seed(seed: Seed, level: int) -> str:
    # Per-level stream: "ABC123" level 3 -> "ABC123-L3"
    return f"{seed}-L{level}"


@dataclass(init=False)
class SeededRandom:
    state: int

    def __init__(self, seed: Seed) -> None:
        self.state = seed_to_state(seed)

    def next(self) -> float:
        self.state = (self.state + GOLDEN) & M32
        t = self.state
        t = imul(t ^ (t >> 15), t | 1)
        t ^= (t + imul(t ^ (t >> 7), t | 61)) & M32
        return ((t ^ (t >> 14)) & M32) / TWO_32

    def range(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi)."""
        if hi <= lo:
            raise ValueError(f"empty range [{lo}, {hi})")
        return int(self.next() * (hi - lo)) + lo

    def chance(self, p: float) -> bool:
        return self.next() < p

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("pick from empty sequence")
        return items[self.range(0, len(items))]

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        for i in range(len(items) - 1, 0, -1):
            j = self.range(0, i + 1)
            items[i], items[j] = items[j], items[i]
        return items


def make_seed_code(rng: Optional[SeededRandom] = None) -> str:
    """Shareable 6-char seed code. Without a source this draws OS entropy."""
    if rng is None:
        sysrand = random.SystemRandom()
        return "".join(sysrand.choice(SEED_ALPHABET) for _ in range(SEED_CODE_LEN))
    chars: List[str] = [rng.pick(SEED_ALPHABET) for _ in range(SEED_CODE_LEN)]
    return "".join(chars)
