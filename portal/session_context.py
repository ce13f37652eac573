"""
Session provider: hands each request its own SessionStore.

The provider is installed on the app once. For every request it builds a
store over the configured storage (the signed cookie session by default),
runs init(), and exposes the result to views via use_session() and to
templates via the `auth` context variable.
"""

import logging
from typing import Callable, Optional

from flask import Flask, current_app, g, session

from portal.config import PortalSettings
from portal.models import UserRecord
from portal.services.base import ApiClient
from portal.session_store import FlaskSessionStorage, Session, SessionStorage, SessionStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "session_provider"

StorageFactory = Callable[[], SessionStorage]


class SessionProvider:
    """Per-request session store factory registered as a Flask extension."""

    def __init__(
        self,
        app: Optional[Flask] = None,
        settings: Optional[PortalSettings] = None,
        storage_factory: Optional[StorageFactory] = None,
    ):
        self.settings = settings
        self.storage_factory = storage_factory
        if app is not None:
            self.init_app(app, settings, storage_factory)

    def init_app(
        self,
        app: Flask,
        settings: PortalSettings,
        storage_factory: Optional[StorageFactory] = None,
    ) -> None:
        self.settings = settings
        if storage_factory is not None:
            self.storage_factory = storage_factory
        if self.storage_factory is None:
            max_bytes = settings.session_cookie_max_bytes
            self.storage_factory = lambda: FlaskSessionStorage(session, max_bytes=max_bytes)

        app.extensions[EXTENSION_KEY] = self
        app.before_request(self._load_session)
        app.context_processor(self._inject_session)

    def create_store(self) -> SessionStore:
        return SessionStore(self.storage_factory())

    def _load_session(self) -> None:
        store = self.create_store()
        g.session_store = store
        store.init()

    @staticmethod
    def _inject_session():
        store = g.get("session_store")
        state = store.session if store is not None else Session(is_loading=True)
        return {
            "auth": {
                "is_authenticated": state.is_authenticated,
                "is_loading": state.is_loading,
                "user": state.user,
            }
        }


def get_provider() -> SessionProvider:
    provider = current_app.extensions.get(EXTENSION_KEY)
    if provider is None:
        raise RuntimeError("SessionProvider is not installed on this app")
    return provider


def get_session_store() -> SessionStore:
    """
    The current request's store.

    Raises RuntimeError when called outside a request the provider handled.
    """
    store = g.get("session_store")
    if store is None:
        raise RuntimeError("use_session() must be called inside a request handled by SessionProvider")
    return store


def use_session() -> Session:
    return get_session_store().session


def current_user() -> Optional[UserRecord]:
    return use_session().user


def get_api_client() -> ApiClient:
    """Backend client bound to the signed-in user's token (if any)."""
    settings = get_provider().settings
    return ApiClient(
        settings.api_base_url,
        token=use_session().token,
        timeout=settings.request_timeout,
        verify_ssl=settings.api_verify_ssl,
    )
