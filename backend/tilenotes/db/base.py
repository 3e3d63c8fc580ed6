from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from tilenotes.config import settings
from tilenotes.utils.logging import get_logger

logger = get_logger(__name__)


def _client_options(bearer_token: str | None = None) -> ClientOptions:
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    if bearer_token:
        # Storage and PostgREST both read the Authorization header from options
        options.headers["Authorization"] = f"Bearer {bearer_token}"
    return options


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Return a cached Supabase client authenticated with the service role key.

    Only background enrichment uses it; those jobs run after the request that
    scheduled them is gone, so there is no user JWT to forward.
    """
    logger.debug("Initializing Supabase admin client")
    if not settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for admin client")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=_client_options(),
    )


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    With a JWT the PostgREST and storage calls run as that user, so row-level
    security scopes every read and write to the owner.
    """
    logger.debug("Creating request-scoped Supabase client")
    anon_key = settings.supabase_anon_key
    if not anon_key:
        raise RuntimeError("supabase_anon_key is required for request client")

    client = create_client(settings.supabase_url, anon_key, options=_client_options(bearer_token))
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
