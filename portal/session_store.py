"""
Session store: the signed-in user's token and identity.

The store owns the Session value and is the only writer of the two durable
storage keys (`token`, `user`). Views read `store.session`; they never touch
storage directly.

Lifecycle:
    store = SessionStore(storage)   # session.is_loading is True
    store.init()                    # hydrate from storage, self-heal if stale
    store.login(token, user)        # persist, then mark authenticated
    store.logout()                  # wipe storage and memory
"""

import base64
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, MutableMapping, Optional

from pydantic import ValidationError

from portal.models import UserRecord

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


# ============================================================================
# Durable storage
# ============================================================================

class StorageError(Exception):
    """A durable storage write could not be completed."""


class StorageQuotaExceeded(StorageError):
    """The write would push the store past its byte budget."""


class SessionStorage(ABC):
    """Minimal string key-value interface the session store persists to."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class MemoryStorage(SessionStorage):
    """
    Dict-backed storage, optionally bounded.

    Used by tests and by anything that drives the portal without a browser.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.max_bytes = max_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            used = sum(len(k) + len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if used + len(key) + len(value.encode("utf-8")) > self.max_bytes:
                raise StorageQuotaExceeded(f"Storing '{key}' exceeds {self.max_bytes} bytes")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


# Encoded size of a couple of queued toasts in the cookie
FLASH_HEADROOM = 256


class FlaskSessionStorage(SessionStorage):
    """
    Storage over Flask's signed cookie session.

    Browsers silently drop cookies larger than about 4 KB, so writes are
    checked against a byte budget and refused up front instead. The budget
    keeps `flash_headroom` bytes free for toasts flashed later in the same
    request (a login is followed by "Welcome back, ...").
    """

    def __init__(
        self, session: MutableMapping[str, Any], max_bytes: int = 4093, flash_headroom: int = FLASH_HEADROOM
    ):
        self._session = session
        self.max_bytes = max_bytes
        self.flash_headroom = flash_headroom

    def get(self, key: str) -> Optional[str]:
        value = self._session.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        # The signed cookie is base64 of the JSON payload plus signature.
        projected = dict(self._session)
        projected[key] = value
        encoded = json.dumps(projected, default=str, separators=(",", ":"))
        estimated = (len(encoded.encode("utf-8")) * 4) // 3 + 64
        if estimated + self.flash_headroom > self.max_bytes:
            raise StorageQuotaExceeded(
                f"Session cookie would be ~{estimated} bytes plus {self.flash_headroom} for toasts "
                f"(limit {self.max_bytes})"
            )
        self._session[key] = value
        if hasattr(self._session, "permanent"):
            self._session.permanent = True

    def remove(self, key: str) -> None:
        self._session.pop(key, None)


# ============================================================================
# Token claims
# ============================================================================

def decode_token_claims(token: str) -> Dict[str, Any]:
    """
    Read the payload of a JWT without verifying it.

    The backend verifies signatures; the portal only needs the role and
    expiry claims for display and gating. Non-JWT tokens yield {}.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return {}
    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
    except (ValueError, UnicodeError):
        return {}
    return claims if isinstance(claims, dict) else {}


# ASP.NET Identity emits roles under the long claim-type URI.
_ROLE_CLAIMS = ("role", "roles", "http://schemas.microsoft.com/ws/2008/06/identity/claims/role")


def roles_from_claims(claims: Dict[str, Any]) -> List[str]:
    for claim in _ROLE_CLAIMS:
        value = claims.get(claim)
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(v) for v in value]
    return []


def is_expired(claims: Dict[str, Any], now: float) -> bool:
    exp = claims.get("exp")
    return isinstance(exp, (int, float)) and exp <= now


# ============================================================================
# Session
# ============================================================================

@dataclass(frozen=True)
class Session:
    """
    Snapshot of authentication state.

    is_authenticated is derived so it can never disagree with token/user.
    """

    token: Optional[str] = None
    user: Optional[UserRecord] = None
    is_loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None


class SessionExpired(Exception):
    """The stored token's exp claim is in the past."""


class SessionStore:
    """Owns the Session value and its two durable storage keys."""

    def __init__(self, storage: SessionStorage, clock: Callable[[], float] = time.time):
        self._storage = storage
        self._clock = clock
        self._session = Session(is_loading=True)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    def init(self) -> Session:
        """
        Hydrate from storage.

        Missing or unparsable data and expired tokens wipe both keys and leave
        the store unauthenticated. Always ends with is_loading False.
        """
        self._session = Session(token=self._session.token, user=self._session.user, is_loading=True)
        try:
            token = self._storage.get(TOKEN_KEY)
            raw_user = self._storage.get(USER_KEY)
            if not token or not raw_user:
                self._reset(wipe_storage=token is not None or raw_user is not None)
                return self._session

            claims = decode_token_claims(token)
            if is_expired(claims, self._clock()):
                raise SessionExpired("stored token has expired")

            user = self._with_token_roles(UserRecord.model_validate(json.loads(raw_user)), claims)
            self._session = Session(token=token, user=user, is_loading=False)
        except (ValueError, TypeError, ValidationError, SessionExpired) as e:
            # ValueError covers json.JSONDecodeError
            logger.warning(f"Discarding stored session: {e}")
            self._reset(wipe_storage=True)
        finally:
            if self._session.is_loading:
                self._session = Session(
                    token=self._session.token, user=self._session.user, is_loading=False
                )
        return self._session

    def login(self, token: str, user: UserRecord) -> Session:
        """
        Persist token and user, then mark the session authenticated.

        Raises:
            StorageError: storage refused the write; memory is unchanged.
        """
        user = self._with_token_roles(user, decode_token_claims(token))
        self._storage.set(TOKEN_KEY, token)
        try:
            self._storage.set(USER_KEY, user.model_dump_json(by_alias=True))
        except StorageError:
            self._storage.remove(TOKEN_KEY)
            raise
        self._session = Session(token=token, user=user, is_loading=False)
        logger.info(f"[user:{user.user_id[:8]}] signed in as {user.user_type or 'unknown'}")
        return self._session

    def logout(self) -> Session:
        """Wipe storage and memory. Needs no backend round-trip."""
        user = self._session.user
        self._reset(wipe_storage=True)
        if user is not None:
            logger.info(f"[user:{user.user_id[:8]}] signed out")
        return self._session

    def _reset(self, wipe_storage: bool) -> None:
        if wipe_storage:
            self._storage.remove(TOKEN_KEY)
            self._storage.remove(USER_KEY)
        self._session = Session(token=None, user=None, is_loading=False)

    @staticmethod
    def _with_token_roles(user: UserRecord, claims: Dict[str, Any]) -> UserRecord:
        roles = roles_from_claims(claims)
        if not roles or roles == user.roles:
            return user
        return user.model_copy(update={"roles": roles})
