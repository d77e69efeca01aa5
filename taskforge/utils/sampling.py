import random
from typing import Sequence, Tuple, TypeVar

from taskforge.models.task import TaskPriority, TaskStatus

T = TypeVar("T")

STATUS_DISTRIBUTION: Sequence[Tuple[TaskStatus, float]] = (
    (TaskStatus.TODO, 25),
    (TaskStatus.IN_PROGRESS, 25),
    (TaskStatus.IN_REVIEW, 15),
    (TaskStatus.DONE, 25),
    (TaskStatus.BACKLOG, 10),
)

PRIORITY_DISTRIBUTION: Sequence[Tuple[TaskPriority, float]] = (
    (TaskPriority.LOW, 25),
    (TaskPriority.MEDIUM, 50),
    (TaskPriority.HIGH, 25),
)


def weighted_pick(dist: Sequence[Tuple[T, float]], rng: random.Random) -> T:
    """Draw one value from ordered (value, weight) pairs.

    Walks the list subtracting weights from a uniform draw in [0, total) and
    returns the first value where the remainder reaches zero. If rounding
    leaves the remainder positive after the walk, the last value is returned.
    """
    if not dist:
        raise ValueError("distribution is empty")
    if any(weight <= 0 for _, weight in dist):
        raise ValueError("weights must be positive")

    total = sum(weight for _, weight in dist)
    r = rng.random() * total
    for value, weight in dist:
        r -= weight
        if r <= 0:
            return value
    # floating-point fallback
    return dist[-1][0]


def rand_int(rng: random.Random, low: int, high: int) -> int:
    return rng.randint(low, high)


def choice(rng: random.Random, seq: Sequence[T]) -> T:
    return seq[rng.randrange(len(seq))]
