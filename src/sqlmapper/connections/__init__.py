"""
Connection lookup for gateways.
"""

from .locator import ConnectionFactory, ConnectionLocator

__all__ = ["ConnectionFactory", "ConnectionLocator"]
