"""
HTTP clients for the GalactaVista API.
"""

from .client import APIClient
from .media import MediaClient

__all__ = [
    "APIClient",
    "MediaClient"
]
