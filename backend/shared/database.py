"""
Database client factory for Supabase.

The returned client uses the service role key, since the credential store
reads password hashes that row level security would otherwise hide.
"""

from supabase import create_client, Client

from .config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role.

    The caller owns the client; the service container creates one per
    application and shares it between repositories.

    Args:
        settings: Application settings carrying the Supabase URL and key

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If the Supabase configuration is incomplete
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )
