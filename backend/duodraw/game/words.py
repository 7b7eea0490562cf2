from __future__ import annotations

import random
from typing import Sequence


DEFAULT_WORDS_EN: tuple[str, ...] = (
    "cat", "dog", "house", "tree", "car", "sun", "moon", "star", "fish", "bird",
    "apple", "banana", "pizza", "cake", "book", "phone", "computer", "chair", "table", "bed",
    "mountain", "ocean", "forest", "desert", "rainbow", "butterfly", "elephant", "guitar", "piano", "bicycle",
)


class WordSource:
    """Uniform random pick from a fixed catalog. Repeats are allowed."""

    def __init__(self, words: Sequence[str] = DEFAULT_WORDS_EN, rng: random.Random | None = None) -> None:
        catalog = [w.strip() for w in words if w and w.strip()]
        if not catalog:
            raise ValueError("word catalog is empty")
        self._words = tuple(catalog)
        self._rng = rng or random.Random()

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def draw(self) -> str:
        return self._rng.choice(self._words)
