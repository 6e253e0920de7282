class FogscaleError(Exception):
    """Base class for every error raised by fogscale."""

class ConfigurationError(FogscaleError):
    """Raised when a scalable object or handler is configured incorrectly."""

class ScalerConfigError(ConfigurationError):
    """Raised when trigger metadata cannot be turned into a scaler."""

class ScalerError(FogscaleError):
    """Raised by a scaler when its signal source cannot be read."""
