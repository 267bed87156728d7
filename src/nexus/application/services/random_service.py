from __future__ import annotations

import random
import uuid
from typing import Any, Mapping, Optional, Sequence, TypeVar

from nexus.application.services.seed_policy import derive_seed

T = TypeVar("T")


class RandomService:
    """Single source of draws for the simulation.

    Economy, combat, story and travel code never touch the ``random`` module
    directly; they take one of these so tests can reseed or script outcomes.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self.rng = random.Random(seed)

    @classmethod
    def from_namespace(cls, namespace: str, context: Mapping[str, Any]) -> "RandomService":
        return cls(seed=derive_seed(namespace, context))

    def set_seed(self, seed: Optional[int]) -> None:
        self.seed = seed
        self.rng.seed(seed)

    def random_int(self, minimum: int, maximum: int) -> int:
        """Inclusive on both ends."""
        return self.rng.randint(int(minimum), int(maximum))

    def random_float(self, minimum: float, maximum: float) -> float:
        return self.rng.uniform(float(minimum), float(maximum))

    def random_choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("random_choice requires a non-empty sequence")
        return seq[self.rng.randrange(len(seq))]

    def random_chance(self, probability: float) -> bool:
        return self.rng.random() < float(probability)

    def shuffle(self, seq: Sequence[T]) -> list[T]:
        items = list(seq)
        self.rng.shuffle(items)
        return items

    def uuid(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))
