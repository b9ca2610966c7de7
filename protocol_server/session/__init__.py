from protocol_server.session.store import SessionRecord, SessionStore

__all__ = ["SessionRecord", "SessionStore"]
