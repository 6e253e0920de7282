"""Arithmetic shared by the scaling decisions."""

from fogscale.scalers.base import MetricSpec, MetricTargetType
from typing import Iterable

def get_target_average_value(specs: Iterable[MetricSpec]) -> int:
    """
    Floor of the mean `AverageValue` target over the given specs, 0 when there is none.
    Specs with another target type do not take part in the mean.
    """

    targets = [int(spec.target_quantity) for spec in specs if spec.target_type == MetricTargetType.AVERAGE_VALUE]
    if not targets:
        return 0
    return sum(targets) // len(targets)

def divide_with_ceil(numerator: int, denominator: int) -> int:
    """Integer division rounded up. A non-positive denominator yields 0."""

    if denominator <= 0 or numerator <= 0:
        return 0
    return -(-numerator // denominator)
