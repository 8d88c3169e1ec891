"""Session persistence behind a small get/put interface.

Two interchangeable backends: a process-local map and a Redis-compatible REST
key-value service (Upstash / Vercel KV command API). ``session_lock`` only
serializes writers inside one process; the KV backend has no cross-process
lock, so two workers answering the same session can still lose an update.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from config.settings import Settings
from interview_session.state import Session
from llm_gateway.llm_gateway import HttpClient, _close_safely, _post
from services.errors import ConfigurationError, UpstreamTransportError

logger = logging.getLogger(__name__)

KEY_PREFIX = "interview:session:"


class KvStoreError(UpstreamTransportError):
    pass


class _LockEntry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class SessionStore(ABC):
    """Capability interface injected into the interview engine."""

    def __init__(self) -> None:
        self._locks: Dict[str, _LockEntry] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        ...

    @abstractmethod
    def put(self, session_id: str, session: Session) -> None:
        ...

    def _checkout(self, session_id: str) -> _LockEntry:
        with self._locks_guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = _LockEntry()
                self._locks[session_id] = entry
            entry.holders += 1
        return entry

    def _release(self, session_id: str, entry: _LockEntry) -> None:
        with self._locks_guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[session_id]

    @contextmanager
    def session_lock(self, session_id: str) -> Iterator[None]:
        """Hold the per-session lock for one read-modify-write cycle.

        Entries are counted per holder or waiter and dropped once the last one
        leaves, so the map only tracks sessions currently in use.
        """

        entry = self._checkout(session_id)
        try:
            with entry.lock:
                yield
        finally:
            self._release(session_id, entry)


class InMemorySessionStore(SessionStore):
    """Volatile map; copies on the way in and out so callers never share state."""

    def __init__(self) -> None:
        super().__init__()
        self._sessions: Dict[str, Session] = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> Optional[Session]:
        with self._guard:
            session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    def put(self, session_id: str, session: Session) -> None:
        snapshot = session.model_copy(deep=True)
        with self._guard:
            self._sessions[session_id] = snapshot

    def __len__(self) -> int:
        return len(self._sessions)


class KvSessionStore(SessionStore):
    """Sessions as JSON strings in a remote KV service, expiring after ``ttl_s``."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        ttl_s: int = 86400,
        timeout_s: float = 10.0,
        client: Optional[HttpClient] = None,
    ) -> None:
        super().__init__()
        self._url = base_url.rstrip("/")
        self._token = token
        self._ttl_s = ttl_s
        self._timeout_s = timeout_s
        self._client = client

    def get(self, session_id: str) -> Optional[Session]:
        raw = self._command(["GET", KEY_PREFIX + session_id])
        if raw is None:
            return None
        try:
            return Session.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Stored session %s is unreadable: %s", session_id, exc)
            raise KvStoreError(f"Stored session is unreadable: {session_id}") from exc

    def put(self, session_id: str, session: Session) -> None:
        self._command(["SET", KEY_PREFIX + session_id, session.model_dump_json(), "EX", str(self._ttl_s)])

    def _command(self, command: List[str]) -> Any:
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {self._token}"}
        try:
            response, close_cb = _post(self._url, command, headers, self._timeout_s, self._client)
        except Exception as exc:  # noqa: BLE001
            logger.error("KV transport failure: %s", exc)
            raise KvStoreError("KV transport failed", {"error": str(exc)}) from exc
        try:
            if response.status_code >= 400:
                logger.error("KV error status: %s", response.status_code)
                raise KvStoreError(f"KV returned status {response.status_code}")
            try:
                data = response.json()
            except ValueError as exc:
                raise KvStoreError("KV payload was not JSON") from exc
        finally:
            _close_safely(close_cb)
        if isinstance(data, dict) and data.get("error"):
            raise KvStoreError(f"KV command failed: {data['error']}")
        return data.get("result") if isinstance(data, dict) else None


def build_session_store(cfg: Settings) -> SessionStore:
    """Pick the configured persistence strategy."""

    if cfg.SESSION_STORE == "kv":
        if not cfg.KV_REST_API_URL or not cfg.KV_REST_API_TOKEN:
            raise ConfigurationError("KV_REST_API_URL and KV_REST_API_TOKEN are required for SESSION_STORE=kv")
        return KvSessionStore(
            cfg.KV_REST_API_URL,
            cfg.KV_REST_API_TOKEN,
            ttl_s=cfg.SESSION_TTL_SECONDS,
            timeout_s=cfg.KV_TIMEOUT_S,
        )
    return InMemorySessionStore()


__all__ = ["SessionStore", "InMemorySessionStore", "KvSessionStore", "KvStoreError", "build_session_store", "KEY_PREFIX"]
