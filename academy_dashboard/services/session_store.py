from __future__ import annotations

import json
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable

from academy_dashboard.core.response import StorageError
from academy_dashboard.services.auth_service import AuthError, AuthService


logger = logging.getLogger(__name__)

TOKEN_KEY = 'token'
USER_KEY = 'user'


class SessionState(str, Enum):
    ANONYMOUS = 'anonymous'
    LOADING = 'loading'
    AUTHENTICATED = 'authenticated'


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(MemoryStorage):
    """String key/value storage persisted as one JSON file, surviving restarts."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        super().__init__(self._load())

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding='utf-8') or '{}')
        except json.JSONDecodeError:
            logger.warning('session_storage_corrupt path=%s', self._path)
            return {}
        return {str(key): str(value) for key, value in raw.items()} if isinstance(raw, dict) else {}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._items), encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            super().set_item(key, value)
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            super().remove_item(key)
            self._flush()


Listener = Callable[[SessionState, dict | None], None]


class SessionStore:
    """Process-wide authentication state: anonymous, loading or authenticated.

    Starts in ``loading`` when a token was persisted, otherwise ``anonymous``.
    Listeners are called with ``(state, user)`` after every transition.
    """

    def __init__(self, auth: AuthService, storage: MemoryStorage) -> None:
        self._auth = auth
        self._storage = storage
        self._listeners: list[Listener] = []
        self.user: dict | None = None
        self.state = SessionState.LOADING if storage.get_item(TOKEN_KEY) else SessionState.ANONYMOUS

    @property
    def token(self) -> str | None:
        return self._storage.get_item(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def restore(self) -> dict | None:
        """Resolve a ``loading`` session with a who-am-I lookup."""
        if self.state != SessionState.LOADING:
            return self.user
        try:
            cached = json.loads(self._storage.get_item(USER_KEY) or 'null')
            user_id = cached.get('id') if isinstance(cached, dict) else None
            user = self._auth.me(user_id)['data']
        except (AuthError, StorageError, json.JSONDecodeError) as exc:
            logger.info('session_restore_failed reason=%s', exc)
            self._clear()
            return None
        self._persist(user, self.token)
        return user

    def login(self, email: str, password: str) -> dict:
        payload = self._auth.login(email, password)['data']
        self._persist(payload['user'], payload['token'])
        return payload['user']

    def register(self, *, name: str, email: str, password: str, role: str = 'teacher') -> dict:
        payload = self._auth.register(name=name, email=email, password=password, role=role)['data']
        self._persist(payload['user'], payload['token'])
        return payload['user']

    def logout(self) -> None:
        try:
            self._auth.logout()
        except Exception:
            logger.exception('session_remote_logout_failed')
        finally:
            self._clear()

    def _persist(self, user: dict, token: str | None) -> None:
        self._storage.set_item(TOKEN_KEY, token or '')
        self._storage.set_item(USER_KEY, json.dumps(user))
        self.user = user
        self._set_state(SessionState.AUTHENTICATED)

    def _clear(self) -> None:
        self._storage.remove_item(TOKEN_KEY)
        self._storage.remove_item(USER_KEY)
        self.user = None
        self._set_state(SessionState.ANONYMOUS)

    def _set_state(self, state: SessionState) -> None:
        previous = self.state
        self.state = state
        if previous != state:
            logger.info('session_state_changed from=%s to=%s', previous.value, state.value)
        for listener in list(self._listeners):
            listener(state, self.user)
