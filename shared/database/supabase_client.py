from supabase import create_client, Client
from functools import lru_cache
from ..utils.config import get_settings

@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get Supabase client singleton (shared by every repository in the process)"""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)


def page_ranges(chunk_size: int):
    """Yield inclusive (start, end) row offsets for PostgREST ``.range()`` paging."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    start = 0
    while True:
        yield start, start + chunk_size - 1
        start += chunk_size
