"""FastAPI dependencies."""

from chainops.services.registry import Services
from chainops.services.registry import get_services as _registry_services


def get_services() -> Services:
    """Services for the current process (overridden in tests)."""
    return _registry_services()
