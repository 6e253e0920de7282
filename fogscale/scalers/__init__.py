from fogscale.constants import DEFAULT_GLOBAL_TIMEOUT
from fogscale.errors import ScalerConfigError
from fogscale.utils.logger import get_base_logger
from typing import Callable, Dict, List

from .base import MetricSpec, MetricTargetType, MetricValue, Scaler, ScalerConfig, normalize_string
from .kafka import KafkaLagScaler
from .stock import StockScaler

_logger = get_base_logger("fogscale.scalers")

# Trigger type -> callable building the scaler from its config.
SCALER_BUILDERS: Dict[str, Callable[[ScalerConfig], Scaler]] = {
    "stock": StockScaler,
    "kafka": KafkaLagScaler,
}

def register_scaler(trigger_type: str, builder: Callable[[ScalerConfig], Scaler]) -> None:
    """Makes a scaler available to triggers of the given type."""

    SCALER_BUILDERS[trigger_type] = builder

async def build_scalers(scalable_object, global_timeout: float = DEFAULT_GLOBAL_TIMEOUT) -> List[Scaler]:
    """
    Builds one scaler per trigger of the object.
    If any trigger fails to build, the scalers built so far are closed before the error is raised.
    """

    scalers = []
    try:
        for index, trigger in enumerate(scalable_object.triggers):
            builder = SCALER_BUILDERS.get(trigger.type)
            if builder is None:
                raise ScalerConfigError(f"no scaler found for type: {trigger.type}")

            config = ScalerConfig(
                name=scalable_object.name,
                namespace=scalable_object.namespace,
                trigger_metadata=dict(trigger.metadata),
                global_timeout=global_timeout,
                trigger_name=trigger.name or f"{trigger.type}-{index}",
            )
            scalers.append(builder(config))
    except Exception:
        for scaler in scalers:
            try:
                await scaler.close()
            except Exception as e:
                # The build error is the one reported to the caller.
                _logger.warning("Error closing scaler %s after a failed build: %s", scaler, e)
        raise

    return scalers

__all__ = [
    "MetricSpec",
    "MetricTargetType",
    "MetricValue",
    "Scaler",
    "ScalerConfig",
    "normalize_string",
    "KafkaLagScaler",
    "StockScaler",
    "SCALER_BUILDERS",
    "register_scaler",
    "build_scalers",
]
