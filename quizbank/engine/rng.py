"""Seeded randomness for reproducible quiz sessions.

The generator is a 32-bit mulberry32 keyed by an FNV-1a hash of the seed
string, so a recorded seed replays the exact same draw on any platform.
"""

from __future__ import annotations

import uuid
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
SEED_TOKEN_LENGTH = 8


def _utf16_units(text: str) -> List[int]:
    raw = text.encode("utf-16-le", errors="surrogatepass")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def hash_seed(seed: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of `seed`."""
    h = FNV_OFFSET_BASIS
    for unit in _utf16_units(seed):
        h ^= unit
        h = (h * FNV_PRIME) & MASK32
    return h


def mulberry32(state: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) seeded with a 32-bit integer."""
    t = state & MASK32

    def next_float() -> float:
        nonlocal t
        t = (t + 0x6D2B79F5) & MASK32
        r = ((t ^ (t >> 15)) * (t | 1)) & MASK32
        r ^= (r + (((r ^ (r >> 7)) * (r | 61)) & MASK32)) & MASK32
        return ((r ^ (r >> 14)) & MASK32) / 4294967296

    return next_float


def shuffle_with_rng(items: Sequence[T], rng: Callable[[], float]) -> List[T]:
    """Fisher-Yates shuffle driven by `rng`; returns a new list."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out


def ensure_seed(seed: Optional[str] = None) -> str:
    """Return the stripped seed, or a fresh random token when blank."""
    if seed and seed.strip():
        return seed.strip()
    return uuid.uuid4().hex[:SEED_TOKEN_LENGTH]
