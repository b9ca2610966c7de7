"""
Session-oriented text completion server.

Clients open a session, send completion requests against it and receive the
reply as ND-JSON, SSE or a single JSON document.
"""

__version__ = "1.0.0"
