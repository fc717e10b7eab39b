"""
Sharing Module - Token-addressed report snapshots.
"""

from jobtracker.sharing.service import (
    SharingGateway,
    ShareAccessDeniedError,
    ShareNotFoundError,
    TokenCollisionError,
)

__all__ = [
    "SharingGateway",
    "ShareAccessDeniedError",
    "ShareNotFoundError",
    "TokenCollisionError",
]
