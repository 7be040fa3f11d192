"""
Barangay Portal — Supabase Client (Singleton)
Provides a single, reusable connection to Supabase for all services.
"""

from supabase import create_client, Client
from functools import lru_cache
from app.config import get_settings


def has_supabase_config() -> bool:
    settings = get_settings()
    return bool(settings.supabase_url and (settings.supabase_service_role_key or settings.supabase_anon_key))


@lru_cache()
def get_supabase_client() -> Client:
    """
    Returns a cached Supabase client instance.
    Uses the service role key for full DB access (backend only).
    """
    settings = get_settings()
    client = create_client(
        supabase_url=settings.supabase_url,
        supabase_key=settings.supabase_service_role_key or settings.supabase_anon_key,
    )
    return client
