import logging
from typing import Optional

from supabase import create_client, Client
from palace.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Process-wide clients: anon for user-scoped routes, service role for functions and jobs."""

    _anon: Optional[Client] = None
    _service: Optional[Client] = None

    @classmethod
    def _connect(cls, key: Optional[str], label: str) -> Client:
        if not settings.supabase_url or not key:
            raise RuntimeError(f"Supabase {label} client is not configured")
        logger.info(f"Connecting {label} Supabase client")
        return create_client(settings.supabase_url, key)

    @classmethod
    def anon(cls) -> Client:
        if cls._anon is None:
            cls._anon = cls._connect(settings.supabase_key, "anon")
        return cls._anon

    @classmethod
    def service(cls) -> Client:
        """Bypasses RLS. The audio and commentary caches and the invitation sweeper write through it."""
        if cls._service is None:
            if settings.supabase_service_role_key:
                cls._service = cls._connect(settings.supabase_service_role_key, "service")
            else:
                logger.warning("No service role key configured; cache writes will use the anon key")
                cls._service = cls.anon()
        return cls._service

    @classmethod
    def reset(cls):
        cls._anon = None
        cls._service = None


def get_supabase() -> Client:
    return SupabaseClient.anon()


def get_service_supabase() -> Client:
    return SupabaseClient.service()
