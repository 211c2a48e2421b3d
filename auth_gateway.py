"""
Email + password sign-in and sign-up against the hosted Supabase project.

The auth service owns passwords, sessions and tokens; the backend only needs
the auth user's id and email back.
"""

import httpx
from supabase import AuthApiError, create_client
from supabase import AuthError as SupabaseAuthError

from config import SUPABASE_ANON_KEY, SUPABASE_URL

# failures of the auth service itself rather than of the credentials
UPSTREAM_ERRORS = (httpx.HTTPError, SupabaseAuthError, RuntimeError)

_client = None


class AuthError(Exception):
    """The auth service rejected the request (bad credentials, taken email, ...)."""


def get_client():
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_ANON_KEY:
            raise RuntimeError("Supabase is not configured")
        _client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    return _client


def _call(method, email, password, missing_user):
    try:
        response = method({"email": email, "password": password})
    except AuthApiError as e:
        if e.status and 400 <= e.status < 500:
            raise AuthError(e.message) from e
        raise
    if response.user is None:
        raise AuthError(missing_user)
    return {"id": response.user.id, "email": response.user.email}


def sign_in(email, password):
    """Return {"id", "email"} of the auth user for valid credentials."""
    return _call(get_client().auth.sign_in_with_password, email, password, "User not found.")


def sign_up(email, password):
    return _call(get_client().auth.sign_up, email, password, "Sign up did not return a user.")
