"""
Configuration Module

- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Wire constants, error codes and finish reasons

Usage:
------
```python
from protocol_server.core.config import get_settings
from protocol_server.core.config.constants import ErrorCode
```
"""

from protocol_server.core.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
