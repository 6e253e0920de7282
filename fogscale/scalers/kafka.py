from aiokafka import AIOKafkaConsumer, TopicPartition
from aiokafka.errors import KafkaError
from decimal import Decimal
from fogscale.errors import ScalerConfigError, ScalerError
from fogscale.scalers.base import MetricSpec, MetricTargetType, MetricValue, Scaler, ScalerConfig, normalize_string
from typing import List

DEFAULT_LAG_THRESHOLD = 10

class KafkaLagScaler(Scaler):
    """Scales on the total lag of a consumer group on one topic."""

    def __init__(self, config: ScalerConfig):
        metadata = config.trigger_metadata

        for key in ("bootstrapServers", "consumerGroup", "topic"):
            if not metadata.get(key):
                raise ScalerConfigError(f"no {key} given")

        self.bootstrap_servers = metadata["bootstrapServers"]
        self.group_id = metadata["consumerGroup"]
        self.topic = metadata["topic"]

        try:
            self.lag_threshold = int(metadata.get("lagThreshold") or DEFAULT_LAG_THRESHOLD)
        except ValueError as e:
            raise ScalerConfigError(f"lagThreshold: error parsing lagThreshold {e}") from e

        if self.lag_threshold <= 0:
            raise ScalerConfigError(f"lagThreshold must be positive, got {self.lag_threshold}")

        self.timeout = config.global_timeout
        self.consumer = None

    @property
    def metric_name(self) -> str:
        return normalize_string(f"kafka-{self.topic}")

    async def is_active(self) -> bool:
        return await self.get_total_lag() > 0

    def get_metric_spec_for_scaling(self) -> List[MetricSpec]:
        return [MetricSpec(
            name=self.metric_name,
            target_quantity=Decimal(self.lag_threshold),
            target_type=MetricTargetType.AVERAGE_VALUE,
        )]

    async def get_metrics(self, metric_name: str) -> List[MetricValue]:
        return [MetricValue(metric_name, Decimal(await self.get_total_lag()))]

    async def close(self) -> None:
        if self.consumer is not None:
            consumer, self.consumer = self.consumer, None
            await consumer.stop()

    async def _get_consumer(self) -> AIOKafkaConsumer:
        if self.consumer is None:
            consumer = AIOKafkaConsumer(
                bootstrap_servers=self.bootstrap_servers,
                group_id=self.group_id,
                enable_auto_commit=False,
                request_timeout_ms=int(self.timeout * 1_000),
            )
            # Stored before starting so close() also stops a client whose start failed or was cancelled.
            self.consumer = consumer
            await consumer.start()
        return self.consumer

    async def get_total_lag(self) -> int:
        """Sums end offset minus committed offset over every partition of the topic."""

        try:
            consumer = await self._get_consumer()

            # Refresh cluster metadata so the topic's partitions are known.
            await consumer.topics()
            partitions = consumer.partitions_for_topic(self.topic)
            if not partitions:
                raise ScalerError(f"kafka: topic {self.topic!r} has no partitions")

            topic_partitions = [TopicPartition(self.topic, p) for p in sorted(partitions)]
            end_offsets = await consumer.end_offsets(topic_partitions)

            lag = 0
            for tp in topic_partitions:
                committed = await consumer.committed(tp)
                end = end_offsets.get(tp, 0)
                # A partition the group never committed on is entirely unconsumed.
                lag += max(end - (committed if committed is not None else 0), 0)
            return lag
        except KafkaError as e:
            raise ScalerError(f"kafka: error reading lag of group {self.group_id!r}: {e}") from e
