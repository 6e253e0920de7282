from .aggregation import ScalerDemand, aggregate_demand
from .executor import DecisionLogExecutor, ScaleExecutor
from .handler import ScaleHandler
from .metrics import divide_with_ceil, get_target_average_value
from .registry import ScaleLoopRegistry

__all__ = [
    "ScalerDemand",
    "aggregate_demand",
    "DecisionLogExecutor",
    "ScaleExecutor",
    "ScaleHandler",
    "divide_with_ceil",
    "get_target_average_value",
    "ScaleLoopRegistry",
]
