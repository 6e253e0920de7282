from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fogscale.constants import DEFAULT_GLOBAL_TIMEOUT
from fogscale.utils.time import get_timestamp, to_rfc3339
from datetime import datetime
from typing import Dict, List

import re

_INVALID_METRIC_CHARS = re.compile(r"[/.:%]")

def normalize_string(value: str) -> str:
    """Makes a value usable as an external metric name."""

    return _INVALID_METRIC_CHARS.sub("-", value)

class MetricTargetType(str, Enum):
    VALUE = "Value"
    AVERAGE_VALUE = "AverageValue"
    UTILIZATION = "Utilization"

@dataclass(frozen=True)
class MetricSpec:
    """The target a scaler declares for one of its metrics."""

    name: str
    target_quantity: Decimal
    target_type: MetricTargetType = MetricTargetType.AVERAGE_VALUE

    def to_external_metric(self) -> dict:
        """Renders the spec in the shape an external autoscaler consumes."""

        target = {"type": self.target_type.value}
        match self.target_type:
            case MetricTargetType.AVERAGE_VALUE:
                target["averageValue"] = str(self.target_quantity)
            case MetricTargetType.VALUE:
                target["value"] = str(self.target_quantity)
            case MetricTargetType.UTILIZATION:
                target["averageUtilization"] = int(self.target_quantity)

        return {"type": "External", "external": {"metric": {"name": self.name}, "target": target}}

@dataclass(frozen=True)
class MetricValue:
    """One observed value of a metric."""

    name: str
    value: Decimal
    timestamp: datetime = field(default_factory=get_timestamp)

    def to_external_metric(self) -> dict:
        return {"metricName": self.name, "value": str(self.value), "timestamp": to_rfc3339(self.timestamp)}

@dataclass
class ScalerConfig:
    """Everything a scaler needs to be constructed."""

    name: str
    namespace: str
    trigger_metadata: Dict[str, str] = field(default_factory=dict)
    global_timeout: float = DEFAULT_GLOBAL_TIMEOUT
    trigger_name: str = ""

class Scaler(ABC):
    """
    A single external signal source.

    Scalers are built for one evaluation cycle and released with `close` at its end.
    `is_active` and `get_metrics` may do I/O and fail, `get_metric_spec_for_scaling` must not.
    """

    @abstractmethod
    async def is_active(self) -> bool:
        """Reports whether the signal source currently asks for the workload to run."""
        pass

    @abstractmethod
    def get_metric_spec_for_scaling(self) -> List[MetricSpec]:
        """Returns the targets this scaler declares."""
        pass

    @abstractmethod
    async def get_metrics(self, metric_name: str) -> List[MetricValue]:
        """Returns the current value(s) of the named metric."""
        pass

    async def close(self) -> None:
        """Releases connections or handles held by the scaler."""
        pass
