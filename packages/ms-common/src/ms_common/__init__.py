"""
ms-common: Shared library for ModSentinel.

Provides common data models, configuration management, structured
logging, event hooks, and Prometheus metrics helpers used by the
ModSentinel auditor service.
"""

from ms_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
