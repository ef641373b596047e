"""Transports that carry script commands to an emulator."""

from .base import Backend
from .mock import MockBackend, MockServer
from .port import PortBackend
from .process import ProcessBackend

__all__ = ["Backend", "MockBackend", "MockServer", "PortBackend", "ProcessBackend"]
