"""
SDK - Auth orchestrator and the state machine the application consumes.
"""

from locker_auth.sdk.client import AuthClient, build_client, get_default_client, set_default_client
from locker_auth.sdk.state import AuthStateController, AuthState, AuthStatus

__all__ = [
    "AuthClient",
    "build_client",
    "get_default_client",
    "set_default_client",
    "AuthStateController",
    "AuthState",
    "AuthStatus",
]
