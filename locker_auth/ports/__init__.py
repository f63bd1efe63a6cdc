"""
Ports - Interfaces for record storage and session persistence.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from locker_auth.ports.record_store_port import RecordStorePort
from locker_auth.ports.session_store_port import SessionStorePort

__all__ = [
    "RecordStorePort",
    "SessionStorePort",
]
