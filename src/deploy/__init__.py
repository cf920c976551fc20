"""Red bank deployment configurations and their validation."""

from src.deploy.registry import available_environments, get_config, resolve_environment
from src.deploy.validation import validate

__all__ = ["available_environments", "get_config", "resolve_environment", "validate"]
