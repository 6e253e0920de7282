"""Descriptions of the workloads fogscale makes scaling decisions for."""

from dataclasses import dataclass, field
from enum import Enum
from fogscale.constants import (
    DEFAULT_MAX_REPLICA_COUNT,
    DEFAULT_MIN_REPLICA_COUNT,
    DEFAULT_NAMESPACE,
    DEFAULT_POLLING_INTERVAL,
    KIND_SCALED_JOB,
    KIND_SCALED_OBJECT,
)
from fogscale.errors import ConfigurationError
from typing import Dict, List, Optional

class AggregationStrategy(str, Enum):
    """How the demand of several scalers is combined for a ScaledJob."""

    MAX = "max"
    MIN = "min"
    SUM = "sum"
    AVERAGE = "average"

    @classmethod
    def parse(cls, value: Optional[str]) -> "AggregationStrategy":
        """Resolves a configured strategy name; empty means `max`, `avg` is accepted for `average`."""

        if not value:
            return cls.MAX

        name = value.strip().lower()
        if name == "avg":
            return cls.AVERAGE

        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"unknown aggregation strategy {value!r}") from None

@dataclass(frozen=True)
class ScalableObjectRef:
    """Identity of a scalable object, one running loop at most per ref."""

    namespace: str
    name: str
    kind: str

    def __str__(self):
        return f"{self.kind}/{self.namespace}/{self.name}"

@dataclass
class TriggerSpec:
    """Declares one scaler of a scalable object."""

    type: str
    metadata: Dict[str, str] = field(default_factory=dict)
    name: str = ""

@dataclass
class ScaledObject:
    """A workload scaled continuously through the external metrics pipeline."""

    name: str
    triggers: List[TriggerSpec]
    namespace: str = DEFAULT_NAMESPACE
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    min_replica_count: int = DEFAULT_MIN_REPLICA_COUNT
    max_replica_count: int = DEFAULT_MAX_REPLICA_COUNT
    scale_target_name: str = ""

    kind = KIND_SCALED_OBJECT

    @property
    def ref(self) -> ScalableObjectRef:
        return ScalableObjectRef(self.namespace, self.name, self.kind)

@dataclass
class ScaledJob:
    """A workload scaled by creating jobs, sized by aggregating every scaler's demand."""

    name: str
    triggers: List[TriggerSpec]
    namespace: str = DEFAULT_NAMESPACE
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    max_replica_count: int = DEFAULT_MAX_REPLICA_COUNT
    aggregation_strategy: Optional[str] = None

    kind = KIND_SCALED_JOB

    @property
    def ref(self) -> ScalableObjectRef:
        return ScalableObjectRef(self.namespace, self.name, self.kind)

    @property
    def strategy(self) -> AggregationStrategy:
        return AggregationStrategy.parse(self.aggregation_strategy)

@dataclass
class EvaluationResult:
    """Outcome of one evaluation cycle, handed to the scale executor."""

    is_active: bool = False
    had_error: bool = False
    queue_length: int = 0
    target_replica_value: int = 0
