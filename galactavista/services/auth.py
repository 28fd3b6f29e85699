"""
Auth session manager.
Owns the session state machine, keeps it in step with the persisted credential
store and the API client's token, and notifies subscribers of every change.
"""

import asyncio
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from galactavista.api.client import APIClient
from galactavista.config import get_settings
from galactavista.models.session import Session, SessionState
from galactavista.repositories.credentials import CredentialRepository, FileCredentialRepository
from galactavista.schemas import UserRegisterRequest, UserResponse, UserUpdate
from galactavista.utils.auth import TokenHolder, is_token_expired
from galactavista.utils.exceptions import AuthenticationError, StorageError
from galactavista.utils.validators import ValidationUtils, validate_model
import logging

logger = logging.getLogger(__name__)

Subscriber = Callable[[Session], None]


class AuthSessionManager:
    """
    Session manager for login, registration, logout and profile updates.

    Session-mutating operations are serialized; failures are never retried
    and always reach the caller with their original type.
    """

    def __init__(self, api_client: APIClient, store: CredentialRepository):
        self.api = api_client
        self.store = store
        self._session = Session.anonymous()
        self._subscribers: List[Subscriber] = []
        self._lock = asyncio.Lock()
        self._initialized = False

    # State

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def user(self) -> Optional[UserResponse]:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.authenticated

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback invoked with the new session after every change.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_session(self, session: Session) -> None:
        previous_state = self._session.state
        self._session = session
        if previous_state != session.state:
            logger.debug(f"Session state {previous_state.value} -> {session.state.value}")
        for callback in list(self._subscribers):
            try:
                callback(session)
            except Exception:
                logger.exception("Session subscriber failed")

    async def _discard_credentials(self) -> None:
        """Drop the stored and in-memory token. Store failures are logged only."""
        self.api.clear_token()
        try:
            await self.store.clear_credentials()
        except StorageError as e:
            logger.warning(f"Failed to clear credential store: {e}")

    # Operations

    async def initialize(self) -> Session:
        """
        Restore the session persisted by a previous run.

        Runs once; later calls return the current session. A corrupt or
        expired record clears the store and leaves the session
        unauthenticated. Never raises.
        """
        async with self._lock:
            if self._initialized:
                return self._session
            self._initialized = True
            self._set_session(self._session.with_state(SessionState.INITIALIZING))

            try:
                token, user_json = await self.store.load_credentials()
                if not token and not user_json:
                    self._set_session(Session.anonymous())
                    return self._session

                if not token or not user_json:
                    logger.warning("Stored session is incomplete, discarding it")
                    await self._discard_credentials()
                    self._set_session(Session.anonymous())
                    return self._session

                user = UserResponse.model_validate_json(user_json)
            except (StorageError, PydanticValidationError, ValueError) as e:
                logger.warning(f"Stored session is unreadable, discarding it: {e}")
                await self._discard_credentials()
                self._set_session(Session.anonymous())
                return self._session

            if is_token_expired(token):
                logger.info("Stored token has expired, discarding session")
                await self._discard_credentials()
                self._set_session(Session.anonymous())
                return self._session

            self.api.set_token(token)
            self._set_session(Session(user=user, token=token, state=SessionState.AUTHENTICATED))
            logger.info(f"Restored session for {user.email}")
            return self._session

    async def login(self, email: str, password: str) -> Session:
        """
        Log in, persist the credentials and become authenticated.

        Raises:
            ValidationError, NetworkError, AuthenticationError, HttpError,
            ProtocolError, StorageError: Propagated unchanged; the session is
                left unauthenticated
        """
        async with self._lock:
            self._set_session(self._session.with_state(SessionState.AUTHENTICATING))
            try:
                result = await self.api.login(email, password)
                await self.store.save_credentials(result.token, result.user.model_dump_json())
            except Exception:
                await self._discard_credentials()
                self._set_session(Session.anonymous())
                raise

            self._set_session(Session(user=result.user, token=result.token, state=SessionState.AUTHENTICATED))
            logger.info(f"User logged in: {result.user.email}")
            return self._session

    async def register(
        self,
        user_data: Union[UserRegisterRequest, Mapping[str, Any]],
        confirm_password: Optional[str] = None
    ) -> UserResponse:
        """
        Create an account without logging in.

        The session returns to whatever state it had before; an explicit
        ``login`` is needed afterwards.

        Raises:
            ValidationError: Before any request, on invalid input or a
                password confirmation mismatch
        """
        payload = validate_model(UserRegisterRequest, user_data)
        ValidationUtils.validate_password(payload.password, confirm_password)

        async with self._lock:
            previous = self._session
            self._set_session(previous.with_state(SessionState.AUTHENTICATING))
            try:
                user = await self.api.register(payload)
            finally:
                self._set_session(previous)

        logger.info(f"User registered: {user.email}")
        return user

    async def logout(self) -> Session:
        """Clear the stored and in-memory credentials. Never fails."""
        async with self._lock:
            await self._discard_credentials()
            self._set_session(Session.anonymous())
            logger.info("User logged out")
            return self._session

    async def update_profile(self, profile_data: Union[UserUpdate, Mapping[str, Any]]) -> UserResponse:
        """
        Update the current user's profile and cache the result.

        Raises:
            AuthenticationError: If there is no authenticated session; a 401
                from the server is propagated too and the caller is expected
                to ``logout``
        """
        async with self._lock:
            self._require_authenticated()
            return await self._replace_user(lambda: self.api.update_profile(profile_data))

    async def refresh_profile(self) -> UserResponse:
        """Re-read the current user from the server and cache it."""
        async with self._lock:
            self._require_authenticated()
            return await self._replace_user(self.api.get_profile)

    async def handle_authentication_error(self, exc: BaseException) -> bool:
        """
        Log out if ``exc`` reports an expired session.

        Returns:
            True if the session was ended
        """
        if isinstance(exc, AuthenticationError):
            logger.info("Session expired, logging out")
            await self.logout()
            return True
        return False

    def _require_authenticated(self) -> None:
        if not self._session.authenticated:
            raise AuthenticationError("Not authenticated")

    async def _replace_user(self, fetch_user: Callable[[], Any]) -> UserResponse:
        previous = self._session
        self._set_session(previous.with_state(SessionState.AUTHENTICATING))
        try:
            user = await fetch_user()
            await self.store.save_user(user.model_dump_json())
        except Exception:
            self._set_session(previous)
            raise

        self._set_session(Session(user=user, token=previous.token, state=SessionState.AUTHENTICATED))
        return user


@lru_cache()
def get_session_manager() -> AuthSessionManager:
    """
    Get the process-wide session manager.
    Every consumer shares one session instead of re-reading the store.
    """
    settings = get_settings()
    api_client = APIClient(token_holder=TokenHolder())
    store = FileCredentialRepository(settings.credential_store_file)
    return AuthSessionManager(api_client, store)
