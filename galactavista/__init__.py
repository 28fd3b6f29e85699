"""
GalactaVista client: API client, auth session manager and property collection accessor.
"""

__version__ = "1.0.0"
