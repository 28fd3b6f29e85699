"""
Repository layer for persisted client state.
"""

from .credentials import (
    CredentialRepository,
    InMemoryCredentialRepository,
    FileCredentialRepository,
    TOKEN_KEY,
    USER_KEY
)

__all__ = [
    "CredentialRepository",
    "InMemoryCredentialRepository",
    "FileCredentialRepository",
    "TOKEN_KEY",
    "USER_KEY"
]
