from dataclasses import dataclass
from fogscale.objects import AggregationStrategy
from fogscale.scaling.metrics import divide_with_ceil
from typing import Iterable, Tuple

@dataclass(frozen=True)
class ScalerDemand:
    """What one scaler contributed to a ScaledJob decision."""

    is_active: bool
    queue_length: int = 0
    max_value: int = 0  # Replicas this scaler asks for, queue length / target rounded up.

def aggregate_demand(demands: Iterable[ScalerDemand], strategy: AggregationStrategy) -> Tuple[int, int]:
    """
    Combines the demand of the active scalers into (queue_length, target_replica_value).
    Inactive scalers are ignored, no active scaler yields (0, 0).
    """

    active = [demand for demand in demands if demand.is_active]
    if not active:
        return 0, 0

    match strategy:
        case AggregationStrategy.MAX:
            # First one wins on ties.
            chosen = max(active, key=lambda demand: demand.max_value)
            return chosen.queue_length, chosen.max_value
        case AggregationStrategy.MIN:
            chosen = min(active, key=lambda demand: demand.max_value)
            return chosen.queue_length, chosen.max_value
        case AggregationStrategy.SUM:
            return sum(d.queue_length for d in active), sum(d.max_value for d in active)
        case AggregationStrategy.AVERAGE:
            # Every max_value is already rounded up, so their mean is floored.
            queue_length = divide_with_ceil(sum(d.queue_length for d in active), len(active))
            return queue_length, sum(d.max_value for d in active) // len(active)

    raise ValueError(f"unsupported aggregation strategy: {strategy}")
