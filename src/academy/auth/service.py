"""
Identity provider.

Sign-up, sign-in and sign-out over the document store, plus auth-state
listeners that fire whenever the signed-in principal changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

import jwt
import structlog

from academy.auth.jwt import create_access_token, verify_token
from academy.auth.password import PasswordStrengthError, hash_password, validate_password_strength, verify_password
from academy.errors import AuthenticationError, MissingFieldsError, NotAuthenticatedError, SignUpError
from academy.store.base import SESSIONS, USERS, DocumentStore, utc_timestamp

logger = structlog.get_logger()


@dataclass(frozen=True)
class Principal:
    """An authenticated user bound to one session."""

    user_id: str
    email: str
    name: str
    session_id: str
    token: str = ""


AuthListener = Callable[[Principal | None], None]


class AuthStateNotifier:
    """Fan-out of auth state changes to registered listeners.

    A listener registered with a ``user_id`` only hears about that user;
    one registered without sees every change.
    """

    def __init__(self) -> None:
        self._listeners: list[tuple[AuthListener, str | None]] = []

    def subscribe(self, callback: AuthListener, user_id: str | None = None) -> Callable[[], None]:
        entry = (callback, user_id)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def publish(self, principal: Principal | None, user_id: str | None = None) -> None:
        """Listeners see who is signed in, never the access token."""
        if principal is not None:
            user_id = principal.user_id
            principal = replace(principal, token="")
        for listener, scope in list(self._listeners):
            if scope is not None and scope != user_id:
                continue
            try:
                listener(principal)
            except Exception:
                logger.exception("auth_listener_failed", listener=repr(listener))


auth_events = AuthStateNotifier()


def require_principal(principal: Principal | None) -> Principal:
    """Return the principal or raise NotAuthenticatedError."""
    if principal is None:
        raise NotAuthenticatedError
    return principal


def public_profile(profile: dict[str, Any]) -> dict[str, Any]:
    """Strip credentials from a user document."""
    return {k: v for k, v in profile.items() if k != "passwordHash"}


class IdentityProvider:
    """Email + password identity over the ``users`` and ``sessions`` collections."""

    def __init__(
        self,
        store: DocumentStore,
        notifier: AuthStateNotifier | None = None,
        password_min_length: int = 6,
    ) -> None:
        self.store = store
        self.notifier = notifier or auth_events
        self.password_min_length = password_min_length

    def on_change(self, callback: AuthListener, user_id: str | None = None) -> Callable[[], None]:
        """Register ``callback`` for auth state changes, optionally for one user only.

        Returns an unsubscribe function.
        """
        return self.notifier.subscribe(callback, user_id)

    async def _find_by_email(self, email: str) -> dict[str, Any] | None:
        matches = await self.store.query(USERS, {"email": email}, limit=1)
        return matches[0] if matches else None

    async def sign_up(self, email: str, password: str, name: str) -> Principal:
        """Create an account and its profile document, then sign in."""
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not password or not name:
            msg = "Please fill in all fields"
            raise MissingFieldsError(msg)

        try:
            validate_password_strength(password, self.password_min_length)
        except PasswordStrengthError as e:
            msg = f"Signup error: {e}"
            raise SignUpError(msg) from e

        if await self._find_by_email(email) is not None:
            msg = "Signup error: email address is already in use"
            raise SignUpError(msg)

        user_id = await self.store.create(USERS, {
            "email": email,
            "name": name,
            "passwordHash": hash_password(password),
            "createdAt": utc_timestamp(),
            "subscriptionPlan": None,
            "enrolledChallenges": [],
            "publishedEssays": [],
            "likedEssays": [],
            "partner": None,
        })
        logger.info("user_created", user_id=user_id)
        return await self._open_session(user_id, email, name)

    async def sign_in(self, email: str, password: str) -> Principal:
        """Verify credentials and open a new session."""
        email = (email or "").strip().lower()
        if not email or not password:
            msg = "Please enter email and password"
            raise MissingFieldsError(msg)

        user = await self._find_by_email(email)
        if user is None or not verify_password(password, user.get("passwordHash", "")):
            logger.info("login_failed", email=email)
            msg = "Invalid email or password"
            raise AuthenticationError(msg)

        return await self._open_session(user["id"], email, user.get("name", ""))

    async def sign_out(self, principal: Principal | None) -> None:
        """Revoke the principal's session."""
        principal = require_principal(principal)
        await self.store.set(
            SESSIONS,
            principal.session_id,
            {"revoked": True, "revokedAt": utc_timestamp()},
            merge=True,
        )
        logger.info("session_revoked", user_id=principal.user_id, session_id=principal.session_id)
        self.notifier.publish(None, principal.user_id)

    async def update_profile(self, principal: Principal | None, name: str) -> Principal:
        """Rename the signed-in user. Returns the principal with the new name."""
        principal = require_principal(principal)
        name = (name or "").strip()
        if not name:
            msg = "Please enter a name"
            raise MissingFieldsError(msg)
        await self.store.set(USERS, principal.user_id, {"name": name, "updatedAt": utc_timestamp()}, merge=True)
        logger.info("profile_updated", user_id=principal.user_id)
        updated = replace(principal, name=name)
        self.notifier.publish(updated)
        return updated

    async def resolve(self, token: str) -> Principal | None:
        """Map an access token to a live principal, or None."""
        try:
            payload = verify_token(token)
        except jwt.InvalidTokenError:
            return None

        session = await self.store.read(SESSIONS, payload["sid"])
        if session is None or session.get("revoked") or session.get("userId") != payload["sub"]:
            return None
        user = await self.store.read(USERS, payload["sub"])
        if user is None:
            return None
        return Principal(
            user_id=user["id"],
            email=user.get("email", ""),
            name=user.get("name", ""),
            session_id=session["id"],
            token=token,
        )

    async def _open_session(self, user_id: str, email: str, name: str) -> Principal:
        session_id = await self.store.create(SESSIONS, {
            "userId": user_id,
            "createdAt": utc_timestamp(),
            "revoked": False,
        })
        principal = Principal(
            user_id=user_id,
            email=email,
            name=name,
            session_id=session_id,
            token=create_access_token(user_id, session_id),
        )
        logger.info("session_opened", user_id=user_id, session_id=session_id)
        self.notifier.publish(principal)
        return principal
