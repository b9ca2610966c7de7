"""
Exception Module

Structured exception hierarchy for the protocol server.

Module Structure:
-----------------
- **base.py**: ProtocolError base class
- **validation.py**: Request validation exceptions
- **session.py**: Session lookup exceptions

Usage:
------
```python
from protocol_server.core.exceptions import InvalidSessionError, ProtocolError
```
"""

from protocol_server.core.exceptions.base import ProtocolError
from protocol_server.core.exceptions.session import InvalidSessionError, SessionNotFoundError
from protocol_server.core.exceptions.validation import InvalidRequestError

__all__ = [
    "ProtocolError",
    "InvalidRequestError",
    "InvalidSessionError",
    "SessionNotFoundError",
]
