"""Random-walk forecast series for the cosmetic metrics panel.

Normal draws come from the Box-Muller transform over a random.Random, so a
seeded generator reproduces the same series.
"""

import math
import random


def gaussian(rng: random.Random) -> float:
    """Draw one standard normal sample with the Box-Muller transform."""
    # 1 - random() lies in (0, 1], keeping log() finite
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def random_walk(
    start: float,
    mean: float,
    std: float,
    steps: int,
    rng: random.Random | None = None,
) -> list[float]:
    """Generate a non-negative random walk.

    Each step adds mean + std * z to the previous value, then floors the
    result at zero. With std == 0 the series is an arithmetic progression
    with common difference mean (until the floor is reached).

    Args:
        start: Value before the first step. Not included in the output.
        mean: Mean increment per step.
        std: Standard deviation of the increment.
        steps: Number of values to produce.
        rng: Random source. A fresh unseeded one when omitted.

    Returns:
        A list of exactly `steps` values, all >= 0.

    Raises:
        ValueError: If steps or std is negative.
    """
    if steps < 0:
        raise ValueError(f"steps must be >= 0, got {steps}")
    if std < 0:
        raise ValueError(f"std must be >= 0, got {std}")

    rng = rng or random.Random()
    values: list[float] = []
    current = start
    for _ in range(steps):
        increment = mean if std == 0 else mean + std * gaussian(rng)
        current = max(0.0, current + increment)
        values.append(current)
    return values
