from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence


try:  # optional dependency
    import numpy as _np  # type: ignore
except Exception:  # pragma: no cover - optional
    _np = None


@dataclass
class RandomSource:
    """Uniform, non-cryptographic randomness used for cards and draws."""

    engine: str

    def randint(self, a: int, b: int) -> int:
        raise NotImplementedError

    def sample(self, seq: Sequence[int], k: int) -> List[int]:
        raise NotImplementedError


class PyRandomSource(RandomSource):
    def __init__(self, seed: Optional[int] = None):
        super().__init__(engine="py_random")
        self._rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def sample(self, seq: Sequence[int], k: int) -> List[int]:
        return self._rng.sample(list(seq), k)


class NumpyPCG64Source(RandomSource):  # pragma: no cover - covered when numpy present
    def __init__(self, seed: Optional[int] = None):
        if _np is None:
            raise RuntimeError("numpy is not installed; install bingo-tracker[pcg]")
        super().__init__(engine="numpy_pcg64")
        self._rng = _np.random.Generator(_np.random.PCG64(seed))

    def randint(self, a: int, b: int) -> int:
        return int(self._rng.integers(low=a, high=b + 1))

    def sample(self, seq: Sequence[int], k: int) -> List[int]:
        idxs = self._rng.choice(len(seq), size=k, replace=False)
        return [int(seq[int(i)]) for i in idxs]


def create_rng(engine: str | None = None, seed: Optional[int] = None) -> RandomSource:
    """Build a random source; ``seed=None`` draws entropy from the OS."""
    engine = (engine or "py_random").strip().lower()
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def derive_seed(base_seed: int, step: int, context: str) -> int:
    """Stable 63-bit seed for one step of a seeded run.

    A fixed ``base_seed`` keeps a whole session reproducible while each step
    (and each distinct ``context``) gets its own stream.
    """
    s = f"{base_seed}|{step}|{context}".encode("utf-8")
    digest = hashlib.sha256(s).digest()
    return int.from_bytes(digest[:8], byteorder="big") & ((1 << 63) - 1)
