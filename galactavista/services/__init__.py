"""
Service layer: auth session, property collection and error messages.
"""

from .auth import AuthSessionManager, get_session_manager
from .property import PropertyCollection, PropertyCollectionState
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthSessionManager",
    "get_session_manager",
    "PropertyCollection",
    "PropertyCollectionState",
    "ErrorHandlerService"
]
