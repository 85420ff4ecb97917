"""Service layer."""

from chainops.services.chain_reader import ChainReader
from chainops.services.registry import Services, build_services, get_services

__all__ = [
    "ChainReader",
    "Services",
    "build_services",
    "get_services",
]
