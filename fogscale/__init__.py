from . import config
from . import scalers
from . import scaling

__all__ = [
    "config",
    "scalers",
    "scaling",
]
