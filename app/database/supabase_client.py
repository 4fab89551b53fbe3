from supabase import create_client, Client
from app.config.settings import settings
from typing import Dict

ANON = "anon"
SERVICE = "service"


class SupabaseClient:
    """
    Process-wide Supabase clients.
    The anon client talks to Auth; the service client (service_role key,
    bypasses RLS) reads and writes tables and storage, so callers do
    their own role checks.
    """
    _clients: Dict[str, Client] = {}

    @classmethod
    def get_client(cls, kind: str = ANON) -> Client:
        if kind == SERVICE and not settings.supabase_service_role_key:
            kind = ANON
        if kind not in cls._clients:
            if not settings.supabase_url:
                raise RuntimeError("SUPABASE_URL must be configured")
            key = settings.supabase_service_role_key if kind == SERVICE else settings.supabase_key
            cls._clients[kind] = create_client(settings.supabase_url, key)
        return cls._clients[kind]

    @classmethod
    def reset_client(cls):
        cls._clients.clear()


def get_supabase() -> Client:
    return SupabaseClient.get_client(ANON)


def get_service_supabase() -> Client:
    return SupabaseClient.get_client(SERVICE)
