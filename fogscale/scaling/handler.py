import asyncio

from async_timeout import timeout
from fogscale.constants import DEFAULT_GLOBAL_TIMEOUT
from fogscale.errors import ConfigurationError
from fogscale.logger.scale_logger import ScaleLogger
from fogscale.objects import AggregationStrategy, EvaluationResult, ScaledJob, ScaledObject
from fogscale.scalers import Scaler, build_scalers
from fogscale.scalers.base import MetricSpec, MetricValue
from fogscale.scaling.aggregation import ScalerDemand, aggregate_demand
from fogscale.scaling.executor import ScaleExecutor
from fogscale.scaling.metrics import divide_with_ceil, get_target_average_value
from fogscale.scaling.registry import ScaleLoopRegistry
from typing import List, Tuple

class ScaleHandler:
    """
    Runs one polling loop per scalable object and turns its scalers' signals into decisions.

    Scalers are built fresh for every cycle and closed before the cycle ends, whatever
    branch the evaluation leaves through. Every scaler I/O call is bounded by `global_timeout`.
    """

    def __init__(
        self,
        scale_executor: ScaleExecutor,
        scaler_factory=build_scalers,
        global_timeout: float = DEFAULT_GLOBAL_TIMEOUT,
        registry: ScaleLoopRegistry = None,
        logger: ScaleLogger = None,
        log_dir=None,
    ):
        self.scale_executor = scale_executor

        # Coroutine function (scalable_object, global_timeout) -> list of scalers.
        self.scaler_factory = scaler_factory
        self.global_timeout = global_timeout

        self.registry = registry or ScaleLoopRegistry()
        self.logger = logger or ScaleLogger("scale_handler", dirname=log_dir)

    async def handle_scalable_object(self, scalable_object) -> asyncio.Task:
        """
        Validates the object's configuration and starts its scale loop.
        Configuration errors are raised here and no loop is started for the object.
        """

        ref = scalable_object.ref
        running = self.registry.get(ref)
        if running is not None and not running.done():
            return running

        if isinstance(scalable_object, ScaledJob):
            AggregationStrategy.parse(scalable_object.aggregation_strategy)

        scalers = await self.get_scalers(scalable_object)
        await self._close_scalers(scalers, scalable_object)

        return self.registry.start_loop(ref, lambda: self._scale_loop(scalable_object))

    async def delete_scalable_object(self, scalable_object) -> bool:
        """Stops the scale loop of the object, returns False if none was running."""

        stopped = self.registry.stop_loop(scalable_object.ref)
        if stopped:
            self.logger.std_log("Stopped scale loop for %s", scalable_object.ref)
        return stopped

    async def stop(self) -> None:
        """Stops every running scale loop."""

        await self.registry.stop_all()

    async def get_scalers(self, scalable_object) -> List[Scaler]:
        return await self.scaler_factory(scalable_object, self.global_timeout)

    async def _scale_loop(self, scalable_object) -> None:
        ref = scalable_object.ref
        self.logger.std_log("Starting scale loop for %s, polling every %ss", ref, scalable_object.polling_interval)

        try:
            while True:
                try:
                    await self.check_scalers(scalable_object)
                except ConfigurationError as e:
                    self.logger.warning("Stopping scale loop for %s, invalid configuration: %s", ref, e)
                    return
                except Exception as e:
                    # Retried on the next polling interval.
                    self.logger.warning("Error checking scalers of %s: %s", ref, e)

                await asyncio.sleep(scalable_object.polling_interval)
        except asyncio.CancelledError:
            self.logger.file_log("Scale loop for %s cancelled", ref)
            raise

    async def check_scalers(self, scalable_object) -> EvaluationResult:
        """Runs one evaluation cycle and hands the decision to the scale executor."""

        scalers = await self.get_scalers(scalable_object)

        if isinstance(scalable_object, ScaledJob):
            is_active, queue_length, target_replica_value = await self.is_scaled_job_active(scalers, scalable_object)
            result = EvaluationResult(
                is_active=is_active,
                queue_length=queue_length,
                target_replica_value=target_replica_value,
            )
        else:
            is_active, is_error = await self.is_scaled_object_active(scalers, scalable_object)
            result = EvaluationResult(is_active=is_active, had_error=is_error)

        try:
            if isinstance(scalable_object, ScaledJob):
                await self.scale_executor.request_job_scale(
                    scalable_object, result.is_active, result.queue_length, result.target_replica_value
                )
            else:
                await self.scale_executor.request_scale(scalable_object, result.is_active, result.had_error)
        except Exception as e:
            # The decision stands, the executor gets another chance next cycle.
            self.logger.warning("Error executing scale decision for %s: %s", scalable_object.ref, e)

        return result

    async def is_scaled_object_active(self, scalers: List[Scaler], scaled_object: ScaledObject) -> Tuple[bool, bool]:
        """
        Probes scalers in order until one is active or one fails.
        Scalers after the deciding one are closed without being probed.
        Returns (is_active, is_error).
        """

        is_active = False
        is_error = False

        try:
            for scaler in scalers:
                try:
                    async with timeout(self.global_timeout):
                        is_trigger_active = await scaler.is_active()
                except Exception as e:
                    self.logger.warning("Error getting scale decision for %s: %s", scaled_object.ref, e)
                    is_error = True
                    break

                if is_trigger_active:
                    is_active = True
                    for spec in scaler.get_metric_spec_for_scaling():
                        self.logger.file_log("Scaler for %s is active, metric name %s", scaled_object.ref, spec.name)
                    break
        finally:
            await self._close_scalers(scalers, scaled_object)

        return is_active, is_error

    async def is_scaled_job_active(self, scalers: List[Scaler], scaled_job: ScaledJob) -> Tuple[bool, int, int]:
        """
        Probes every scaler and aggregates the demand of the active ones with the job's strategy.
        A failing scaler only loses its own contribution.
        Returns (is_active, queue_length, target_replica_value).
        """

        try:
            strategy = scaled_job.strategy
        except ConfigurationError:
            await self._close_scalers(scalers, scaled_job)
            raise

        demands = await asyncio.gather(*(self._get_scaler_demand(scaler, scaled_job) for scaler in scalers))

        is_active = any(demand.is_active for demand in demands)
        queue_length, target_replica_value = aggregate_demand(demands, strategy)
        target_replica_value = min(target_replica_value, scaled_job.max_replica_count)

        self.logger.file_log(
            "%s: active=%s queue_length=%s target=%s (strategy %s)",
            scaled_job.ref, is_active, queue_length, target_replica_value, strategy.value,
        )
        return is_active, queue_length, target_replica_value

    async def _get_scaler_demand(self, scaler: Scaler, scaled_job: ScaledJob) -> ScalerDemand:
        ref = scaled_job.ref
        try:
            try:
                async with timeout(self.global_timeout):
                    is_trigger_active = await scaler.is_active()
            except Exception as e:
                self.logger.warning("Error getting scale decision for %s, but continue: %s", ref, e)
                return ScalerDemand(is_active=False)

            try:
                specs = scaler.get_metric_spec_for_scaling()
            except Exception as e:
                self.logger.warning("Error getting metric specs of %s, but continue: %s", ref, e)
                return ScalerDemand(is_active=False)

            if not specs:
                # Nothing to divide the queue length by.
                self.logger.warning("Scaler of %s declares no metric, skipping it", ref)
                return ScalerDemand(is_active=False)

            target_average_value = get_target_average_value(specs)
            metric_name = specs[0].name

            try:
                async with timeout(self.global_timeout):
                    metrics = await scaler.get_metrics(metric_name)
                queue_length = sum(int(metric.value) for metric in metrics if metric.name == metric_name)
            except Exception as e:
                self.logger.warning("Error getting metrics of %s, but continue: %s", ref, e)
                queue_length = 0

            if not is_trigger_active:
                return ScalerDemand(is_active=False)

            return ScalerDemand(
                is_active=True,
                queue_length=queue_length,
                max_value=divide_with_ceil(queue_length, target_average_value),
            )
        finally:
            await self._close_scaler(scaler, scaled_job)

    async def get_metric_specs(self, scaled_object) -> List[MetricSpec]:
        """Collects the targets of every scaler of the object, for the external metrics surface."""

        scalers = await self.get_scalers(scaled_object)
        try:
            return [spec for scaler in scalers for spec in scaler.get_metric_spec_for_scaling()]
        finally:
            await self._close_scalers(scalers, scaled_object)

    async def get_external_metrics(self, scaled_object, metric_name: str) -> List[MetricValue]:
        """Reads `metric_name` from the scalers that declare it. Errors propagate to the caller."""

        scalers = await self.get_scalers(scaled_object)
        values = []
        try:
            for scaler in scalers:
                if not any(spec.name == metric_name for spec in scaler.get_metric_spec_for_scaling()):
                    continue

                async with timeout(self.global_timeout):
                    values.extend(await scaler.get_metrics(metric_name))
        finally:
            await self._close_scalers(scalers, scaled_object)

        return values

    async def _close_scalers(self, scalers: List[Scaler], scalable_object) -> None:
        for scaler in scalers:
            await self._close_scaler(scaler, scalable_object)

    async def _close_scaler(self, scaler: Scaler, scalable_object) -> None:
        # Release failures are reported and never change the decision.
        try:
            async with timeout(self.global_timeout):
                await scaler.close()
        except Exception as e:
            self.logger.warning("Error closing scaler of %s: %s", scalable_object.ref, e)
