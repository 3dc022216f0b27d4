"""Supabase client initialization."""

from functools import lru_cache

from supabase import Client, create_client


@lru_cache(maxsize=1)
def get_supabase(url: str, service_role_key: str) -> Client:
    """
    Get Supabase client instance (cached per credentials).

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If client initialization fails
    """
    try:
        return create_client(url, service_role_key)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e
