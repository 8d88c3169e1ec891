"""Session persistence backends."""
from .session_store import InMemorySessionStore, KvSessionStore, KvStoreError, SessionStore, build_session_store

__all__ = ["InMemorySessionStore", "KvSessionStore", "KvStoreError", "SessionStore", "build_session_store"]
