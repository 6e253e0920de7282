"""
Pytest fixtures for fogscale tests
"""
import pytest

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from fogscale.objects import ScaledJob, ScaledObject, TriggerSpec
from fogscale.scalers.base import MetricSpec, MetricValue, Scaler
from fogscale.scaling.executor import ScaleExecutor
from fogscale.scaling.handler import ScaleHandler


def create_metric_spec(average_value, name="queueLength"):
    return MetricSpec(name=name, target_quantity=Decimal(average_value))


def create_scaler(queue_length, average_value, is_active, metric_name="queueLength"):
    """Scaler mock reporting a fixed activity, target and queue length"""
    scaler = MagicMock(spec=Scaler)
    scaler.is_active = AsyncMock(return_value=is_active)
    scaler.get_metric_spec_for_scaling = MagicMock(return_value=[create_metric_spec(average_value, metric_name)])
    scaler.get_metrics = AsyncMock(return_value=[MetricValue(metric_name, Decimal(queue_length))])
    scaler.close = AsyncMock()
    return scaler


@pytest.fixture
def make_scaler():
    return create_scaler


@pytest.fixture
def metric_spec():
    return create_metric_spec


@pytest.fixture
def executor():
    return AsyncMock(spec=ScaleExecutor)


@pytest.fixture
def handler(executor):
    return ScaleHandler(executor, scaler_factory=AsyncMock(return_value=[]), global_timeout=5)


@pytest.fixture
def scaled_object():
    return ScaledObject(name="frontend", triggers=[TriggerSpec(type="mock")])


@pytest.fixture
def make_scaled_job():
    def _make(max_replica_count=100, strategy=None):
        return ScaledJob(
            name="worker",
            triggers=[TriggerSpec(type="mock")],
            max_replica_count=max_replica_count,
            aggregation_strategy=strategy,
        )
    return _make
