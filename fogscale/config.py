"""Loads scalable objects and handler settings from YAML and the environment."""

from dataclasses import dataclass
from fogscale.constants import (
    DEFAULT_GLOBAL_TIMEOUT,
    DEFAULT_MAX_REPLICA_COUNT,
    DEFAULT_MIN_REPLICA_COUNT,
    DEFAULT_NAMESPACE,
    DEFAULT_POLLING_INTERVAL,
    FOGS_STDOUT,
)
from fogscale.errors import ConfigurationError
from fogscale.objects import AggregationStrategy, ScaledJob, ScaledObject, TriggerSpec
from fogscale.utils.data import get_config, resolve_env_variables
from pathlib import Path
from typing import List, Optional, Tuple

import logging
import yaml

@dataclass
class HandlerSettings:
    """Process-wide settings of the scale handler."""

    global_timeout: float = DEFAULT_GLOBAL_TIMEOUT
    log_dir: Optional[str] = None
    log_level: int = FOGS_STDOUT

    @classmethod
    def from_env(cls) -> "HandlerSettings":
        raw_timeout = get_config("FOGSCALE_GLOBAL_TIMEOUT", default=DEFAULT_GLOBAL_TIMEOUT)
        try:
            global_timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"FOGSCALE_GLOBAL_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from None

        if global_timeout <= 0:
            raise ConfigurationError(f"FOGSCALE_GLOBAL_TIMEOUT must be positive, got {global_timeout}")

        return cls(
            global_timeout=global_timeout,
            log_dir=get_config("FOGSCALE_LOG_DIR"),
            log_level=_parse_level(get_config("FOGSCALE_LOG_LEVEL", default=FOGS_STDOUT)),
        )

def _parse_level(value):
    if isinstance(value, int) or str(value).isdigit():
        return int(value)

    # Accepts standard names and the custom FOGS_* names.
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"unknown log level {value!r}")
    return level

def load_scalable_objects(filepath) -> Tuple[List[ScaledObject], List[ScaledJob]]:
    """
    Reads `scaledObjects` and `scaledJobs` from a YAML file,
    substituting any environment variables on the fly.
    """

    with Path(filepath).open() as f:
        config = resolve_env_variables(yaml.safe_load(f) or {})

    scaled_objects = [parse_scaled_object(item) for item in config.get("scaledObjects") or []]
    scaled_jobs = [parse_scaled_job(item) for item in config.get("scaledJobs") or []]

    return scaled_objects, scaled_jobs

def parse_scaled_object(data: dict) -> ScaledObject:
    name, namespace, triggers = _parse_common(data)

    min_replicas = _parse_int(data, "minReplicaCount", DEFAULT_MIN_REPLICA_COUNT)
    max_replicas = _parse_int(data, "maxReplicaCount", DEFAULT_MAX_REPLICA_COUNT)
    if min_replicas > max_replicas:
        raise ConfigurationError(f"{name}: minReplicaCount {min_replicas} is greater than maxReplicaCount {max_replicas}")

    return ScaledObject(
        name=name,
        namespace=namespace,
        triggers=triggers,
        polling_interval=_parse_polling_interval(data),
        min_replica_count=min_replicas,
        max_replica_count=max_replicas,
        scale_target_name=(data.get("scaleTargetRef") or {}).get("name", name),
    )

def parse_scaled_job(data: dict) -> ScaledJob:
    name, namespace, triggers = _parse_common(data)

    strategy = (data.get("scalingStrategy") or {}).get("multipleScalersCalculation")
    AggregationStrategy.parse(strategy)  # Fail on load, not on the first cycle.

    return ScaledJob(
        name=name,
        namespace=namespace,
        triggers=triggers,
        polling_interval=_parse_polling_interval(data),
        max_replica_count=_parse_int(data, "maxReplicaCount", DEFAULT_MAX_REPLICA_COUNT),
        aggregation_strategy=strategy,
    )

def _parse_common(data: dict):
    if not isinstance(data, dict) or not data.get("name"):
        raise ConfigurationError(f"scalable object without a name: {data!r}")

    name = data["name"]
    triggers = data.get("triggers")
    if not triggers:
        raise ConfigurationError(f"{name}: no triggers given")

    parsed = []
    for trigger in triggers:
        if not isinstance(trigger, dict) or not trigger.get("type"):
            raise ConfigurationError(f"{name}: trigger without a type: {trigger!r}")

        # Scalers parse their metadata from strings.
        metadata = {key: str(value) for key, value in (trigger.get("metadata") or {}).items()}
        parsed.append(TriggerSpec(type=trigger["type"], metadata=metadata, name=trigger.get("name", "")))

    return name, data.get("namespace", DEFAULT_NAMESPACE), parsed

def _parse_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{data.get('name')}: {key} must be an integer, got {value!r}") from None

    if value < 0:
        raise ConfigurationError(f"{data.get('name')}: {key} must not be negative, got {value}")
    return value

def _parse_polling_interval(data: dict) -> float:
    value = data.get("pollingInterval", DEFAULT_POLLING_INTERVAL)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{data.get('name')}: pollingInterval must be a number, got {value!r}") from None

    if value <= 0:
        raise ConfigurationError(f"{data.get('name')}: pollingInterval must be positive, got {value}")
    return value
