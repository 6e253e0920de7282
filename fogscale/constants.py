"""Shared constants for fogscale."""

# Custom log levels, registered with `logging` by the logger package.
FOGS_STDOUT = 21
FOGS_FILE = 22
FOGS_CSV = 23

DEFAULT_FMT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"

# Scaling defaults.
DEFAULT_POLLING_INTERVAL = 30  # Seconds between two evaluation cycles.
DEFAULT_GLOBAL_TIMEOUT = 5.0  # Seconds allowed for a single scaler call.
DEFAULT_MAX_REPLICA_COUNT = 100
DEFAULT_MIN_REPLICA_COUNT = 0
DEFAULT_NAMESPACE = "default"

# Kinds of scalable objects.
KIND_SCALED_OBJECT = "ScaledObject"
KIND_SCALED_JOB = "ScaledJob"

# Columns of the decision CSV log.
DECISION_CSV_HEADER = ["timestamp", "namespace", "name", "kind", "active", "error", "queue_length", "target"]
