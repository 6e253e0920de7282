from .data import get_config, resolve_env_variables
from .time import get_timestamp, to_rfc3339

__all__ = ["get_config", "resolve_env_variables", "get_timestamp", "to_rfc3339"]
