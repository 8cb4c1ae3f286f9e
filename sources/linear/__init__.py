"""Linear broker-management API source."""

from .client import LinearClient
from .mapper import LinearMapper

__all__ = ["LinearClient", "LinearMapper"]
