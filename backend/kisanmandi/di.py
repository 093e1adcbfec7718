"""
Dependency providers for the routers.
Constructs the mandi service once per process and hands it to handlers.
"""
from typing import Optional

from kisanmandi.config import settings
from kisanmandi.http import get_http_client
from kisanmandi.tools.mandi import MandiClient
from kisanmandi_core.services.mandi import MandiService

# Singleton - created on first use, after init_http()
_mandi_service: Optional[MandiService] = None

def get_mandi_service() -> MandiService:
    """Get singleton mandi service."""
    global _mandi_service
    if _mandi_service is None:
        client = MandiClient.from_settings(get_http_client(), settings)
        _mandi_service = MandiService(client, lookup_limit=settings.MANDI_LOOKUP_LIMIT)
    return _mandi_service

def reset_mandi_service() -> None:
    """Drop the singleton (the HTTP client it wraps is being closed)."""
    global _mandi_service
    _mandi_service = None
