"""Manages configuration values read from the environment."""

from dotenv import load_dotenv

import os
import re

# Load environment variables first.
load_dotenv(".env")

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

def resolve_env_variables(value):
    """
    Recursively substitutes `${VAR}` and `${VAR:-default}` references in strings,
    lists and dictionaries with values from the environment.
    Unknown variables without a default are left untouched.
    """

    match value:
        case str():
            return _ENV_PATTERN.sub(_substitute, value)
        case dict():
            return {key: resolve_env_variables(val) for key, val in value.items()}
        case list() | tuple():
            return type(value)(resolve_env_variables(val) for val in value)
    return value

def _substitute(match):
    name, default = match.group(1), match.group(2)
    return os.getenv(name, default if default is not None else match.group(0))

def get_config(config_name: str, cls: object = None, default=None):
    """Retrieves a configuration value from environment variables or a class attribute."""

    # Try to get the value from environment variables.
    ret = os.getenv(config_name)

    if ret is not None:
        return ret

    # If no class is provided, return the default value.
    if cls is None:
        return default

    # Try to get the value from the class attribute, or return the default if it doesn't exist.
    return getattr(cls, config_name.lower(), default)
