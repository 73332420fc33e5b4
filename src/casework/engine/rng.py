"""Seeded randomness for the Director.

Every random draw the Director makes comes from a SeededRNG so that a fixed
seed and a fixed sequence of inputs always replays the same decisions.

Generator (Park-Miller minimal standard, multiplier 48271):
    state = (48271 * state) mod (2^31 - 1)
    value = state / (2^31 - 1)

Seed folding:
    state = seed mod (2^31 - 1), keeping the sign of the seed
    if state <= 0: state += (2^31 - 1) - 1
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")

RNG = Callable[[], float]

MODULUS = 0x7FFFFFFF
MULTIPLIER = 48271
MAX_SAFE_INTEGER = 2**53 - 1


class InvalidInputError(ValueError):
    """Raised when a sampler is given nothing it can sample from."""


def _fold_seed(seed: int) -> int:
    # Truncated remainder: the fold keeps the sign of the seed.
    remainder = abs(seed) % MODULUS
    state = -remainder if seed < 0 else remainder
    if state <= 0:
        state += MODULUS - 1
    return state


def _now_ms() -> int:
    return int(time.time() * 1000)


class SeededRNG:
    """Deterministic stream of floats in [0, 1).

    Calling the instance returns the next value.
    """

    def __init__(self, seed: int | None = None) -> None:
        """Initialize the generator.

        Args:
            seed: Integer seed. Defaults to the current time in milliseconds.
        """
        self.seed = _now_ms() if seed is None else int(seed)
        self._state = _fold_seed(self.seed)

    def __call__(self) -> float:
        self._state = (MULTIPLIER * self._state) % MODULUS
        return self._state / MODULUS


class RNGController:
    """Owns a SeededRNG and can fork independent child streams.

    Attributes:
        seed: Seed the controller was created with
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = _now_ms() if seed is None else int(seed)
        self._generator = SeededRNG(self.seed)
        self._current_seed = self.seed

    def next(self) -> float:
        """Draw the next value in [0, 1)."""
        value = self._generator()
        self._current_seed = math.floor(value * MAX_SAFE_INTEGER)
        return value

    def fork(self, salt: int = 1) -> RNGController:
        """Create a child controller seeded from the last drawn value.

        Forking does not consume a draw from this controller.
        """
        return RNGController(self._current_seed + salt)


@dataclass(frozen=True)
class WeightedItem(Generic[T]):
    """A value paired with its sampling weight."""

    value: T
    weight: float


def _usable_weight(weight: float) -> float:
    if not math.isfinite(weight) or weight < 0:
        return 0.0
    return weight


def random_int(maximum: int, rng: RNG) -> int:
    """Draw an integer in [0, maximum)."""
    return math.floor(rng() * maximum)


def sample(items: Sequence[T], rng: RNG) -> T:
    """Pick one item uniformly.

    Raises:
        InvalidInputError: If items is empty
    """
    if len(items) == 0:
        raise InvalidInputError("Cannot sample from an empty collection")
    return items[random_int(len(items), rng)]


def weighted_sample(items: Sequence[WeightedItem[T]], rng: RNG) -> T:
    """Pick one value with probability proportional to its weight.

    Negative and non-finite weights count as zero. Exactly one draw is taken from rng.

    Args:
        items: Weighted values, in a stable order
        rng: Draw source producing values in [0, 1)

    Returns:
        The first value whose cumulative weight reaches the drawn threshold

    Raises:
        InvalidInputError: If items is empty or every weight is <= 0
    """
    if len(items) == 0:
        raise InvalidInputError("Cannot sample from an empty collection")

    total_weight = sum(_usable_weight(item.weight) for item in items)
    if total_weight <= 0:
        raise InvalidInputError("Cannot sample when all weights are zero")

    threshold = rng() * total_weight
    cumulative = 0.0
    for item in items:
        cumulative += _usable_weight(item.weight)
        if threshold <= cumulative:
            return item.value

    # Floating point overshoot
    return items[-1].value


def shuffle(items: Sequence[T], rng: RNG) -> list[T]:
    """Return a Fisher-Yates shuffled copy of items."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = math.floor(rng() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result
