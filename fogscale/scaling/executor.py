from abc import ABC, abstractmethod
from fogscale.constants import DECISION_CSV_HEADER
from fogscale.logger.scale_logger import ScaleLogger
from fogscale.objects import EvaluationResult, ScalableObjectRef, ScaledJob, ScaledObject
from fogscale.utils.time import to_rfc3339
from typing import Dict

class ScaleExecutor(ABC):
    """Applies scaling decisions to the managed platform."""

    @abstractmethod
    async def request_scale(self, scaled_object: ScaledObject, is_active: bool, is_error: bool) -> None:
        """Activates or idles a continuously scaled workload."""
        pass

    @abstractmethod
    async def request_job_scale(self, scaled_job: ScaledJob, is_active: bool, queue_length: int, target_replica_value: int) -> None:
        """Sizes the jobs of a discretely scaled workload."""
        pass

class DecisionLogExecutor(ScaleExecutor):
    """
    Records decisions instead of applying them.
    Every decision goes to the console and, when a log directory is set, to a CSV file.
    """

    def __init__(self, log_dir=None, logger=None):
        self.logger = logger or ScaleLogger("decisions", dirname=log_dir, csv_header=DECISION_CSV_HEADER)
        self.decisions: Dict[ScalableObjectRef, EvaluationResult] = {}

    async def request_scale(self, scaled_object, is_active, is_error):
        self._record(scaled_object, EvaluationResult(is_active=is_active, had_error=is_error))

    async def request_job_scale(self, scaled_job, is_active, queue_length, target_replica_value):
        self._record(scaled_job, EvaluationResult(
            is_active=is_active,
            queue_length=queue_length,
            target_replica_value=target_replica_value,
        ))

    def _record(self, scalable_object, result: EvaluationResult):
        ref = scalable_object.ref
        self.decisions[ref] = result

        self.logger.std_log("Decision for %s: %s", ref, result)
        self.logger.csv_log([
            to_rfc3339(), ref.namespace, ref.name, ref.kind,
            result.is_active, result.had_error, result.queue_length, result.target_replica_value,
        ])
