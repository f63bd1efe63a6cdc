"""
Auth State Controller - State machine exposed to the application.

    IDLE --initialize--> AUTHENTICATED(user) | LOGGED_OUT
    LOGGED_OUT | AUTHENTICATED | ERROR --start--> PENDING
    PENDING --succeed(user)--> AUTHENTICATED(user)
    PENDING --fail(message)--> ERROR(message)
    any --logout--> LOGGED_OUT

Only one authentication attempt may be in flight: start() while PENDING
raises AuthInProgressError immediately instead of queueing, so two logins
can never race to install different keys.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from locker_auth.domain.user import UserProfile
from locker_auth.errors import AuthInProgressError, InvalidTransitionError, VaultError
from locker_auth.sdk.client import AuthClient

logger = logging.getLogger("locker.auth")


class AuthStatus(Enum):
    """Auth state machine states."""
    IDLE = "idle"                    # Before restore was attempted
    LOGGED_OUT = "logged_out"
    PENDING = "pending"              # Auth attempt in flight
    AUTHENTICATED = "authenticated"
    ERROR = "error"                  # Last attempt failed


@dataclass(frozen=True)
class AuthState:
    """Snapshot consumed by the rest of the application."""
    status: AuthStatus
    user: Optional[UserProfile] = None
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        # A re-login from AUTHENTICATED stays authenticated while pending.
        if self.status == AuthStatus.PENDING:
            return self.user is not None
        return self.status == AuthStatus.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self.status in (AuthStatus.IDLE, AuthStatus.PENDING)


Listener = Callable[[AuthState], None]


class AuthStateController:
    """
    Sequences auth attempts against an AuthClient.

    Example:
        controller = AuthStateController(client)
        controller.initialize()
        controller.login("alice@example.com", "Secr3t!")
        if controller.state.is_authenticated:
            ...
    """

    def __init__(self, client: AuthClient):
        self._client = client
        self._state = AuthState(status=AuthStatus.IDLE)
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with every new state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, state: AuthState):
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self):
        """
        Enter PENDING.

        Raises:
            AuthInProgressError: If an attempt is already pending
            InvalidTransitionError: If initialize() has not run
        """
        with self._lock:
            status = self._state.status
            if status == AuthStatus.PENDING:
                raise AuthInProgressError()
            if status == AuthStatus.IDLE:
                raise InvalidTransitionError("Cannot authenticate before initialization")
            # Keep the user visible while a re-login is in flight.
            self._set(AuthState(status=AuthStatus.PENDING, user=self._state.user))

    def succeed(self, user: UserProfile):
        """PENDING -> AUTHENTICATED(user)."""
        with self._lock:
            self._require(AuthStatus.PENDING, "succeed")
            self._set(AuthState(status=AuthStatus.AUTHENTICATED, user=user))

    def fail(self, message: str):
        """PENDING -> ERROR(message)."""
        with self._lock:
            self._require(AuthStatus.PENDING, "fail")
            self._set(AuthState(status=AuthStatus.ERROR, error=message))

    def logout(self):
        """Any state -> LOGGED_OUT."""
        with self._lock:
            self._set(AuthState(status=AuthStatus.LOGGED_OUT))

    def _require(self, expected: AuthStatus, action: str):
        if self._state.status != expected:
            raise InvalidTransitionError(
                f"Cannot {action} from {self._state.status.value}"
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def initialize(self) -> AuthState:
        """Restore the persisted session. Only valid from IDLE."""
        with self._lock:
            self._require(AuthStatus.IDLE, "initialize")
            try:
                user = self._client.restore()
            except Exception:
                logger.exception("Failed to initialize authentication")
                self._set(AuthState(status=AuthStatus.ERROR, error="Failed to initialize authentication"))
                return self._state

            if user is not None:
                self._set(AuthState(status=AuthStatus.AUTHENTICATED, user=user))
            else:
                self._set(AuthState(status=AuthStatus.LOGGED_OUT))
            return self._state

    def register(self, identifier: str, password: str) -> AuthState:
        return self._attempt("Registration failed", self._client.register, identifier, password)

    def login(self, identifier: str, password: str) -> AuthState:
        return self._attempt("Login failed", self._client.login_local, identifier, password)

    def login_federated(self, assertion: str) -> AuthState:
        return self._attempt("Federated login failed", self._client.login_federated, assertion)

    def sign_out(self) -> AuthState:
        """Log out through the client; always ends LOGGED_OUT."""
        self._client.logout()
        self.logout()
        return self._state

    def _attempt(self, prefix: str, operation: Callable[..., UserProfile], *args) -> AuthState:
        self.start()
        try:
            user = operation(*args)
        except (VaultError, ValueError) as e:
            self._finish(self.fail, f"{prefix}: {e}")
        except Exception:
            logger.exception(prefix)
            self._finish(self.fail, f"{prefix}: Unknown error")
        else:
            if not self._finish(self.succeed, user):
                # Logged out while the attempt was in flight; undo the login.
                self._client.logout()
        return self._state

    def _finish(self, transition: Callable, value) -> bool:
        try:
            transition(value)
        except InvalidTransitionError:
            logger.warning("Auth attempt finished after logout; result discarded")
            return False
        return True
