from fastapi import Header, HTTPException
from typing import Optional
import time
import logging

from app.errors import AuthenticationRequired
from app.schemas.auth import Identity
from app.services.supabase import create_supabase_client

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationRequired("Not authenticated")
    if not authorization.startswith("Bearer "):
        raise AuthenticationRequired("Invalid token format")
    return authorization.split(" ")[1]


def resolve_session(supabase, token: str) -> Identity:
    try:
        start_time = time.time()
        logger.info("Validating token with Supabase")
        user_res = supabase.auth.get_user(token)
        end_time = time.time()
        logger.info(f"Token validation completed in {end_time - start_time:.2f} seconds")
    except Exception as e:
        logger.error(f"Supabase token validation error: {str(e)}")
        if "timed out" in str(e).lower():
            raise HTTPException(
                status_code=504,
                detail="Connection to authentication service timed out. Please try again later."
            )
        raise AuthenticationRequired(f"Authentication error: {str(e)}")

    if not user_res or not user_res.user:
        logger.warning("User not found after successful token validation")
        raise AuthenticationRequired("User not found")

    return Identity(id=user_res.user.id, email=user_res.user.email)


async def user_supabase_client(authorization: Optional[str] = Header(None)):
    token = _bearer_token(authorization)

    logger.info("Creating Supabase client")
    supabase = create_supabase_client()
    identity = resolve_session(supabase, token)

    # Tables and storage both run under the caller's session. Storage copies
    # options.headers when first built, before any route touches it.
    supabase.postgrest.auth(token)
    supabase.options.headers["Authorization"] = f"Bearer {token}"

    logger.info(f"Successfully authenticated user: {identity.id}")
    return {
        "supabase": supabase,
        "user_id": identity.id,
        "identity": identity,
        "token": token,
    }


async def optional_identity(authorization: Optional[str] = Header(None)):
    """Session check for the login page: never fails, just reports."""
    if not authorization:
        return None
    try:
        token = _bearer_token(authorization)
        return resolve_session(create_supabase_client(), token)
    except HTTPException as e:
        logger.info(f"No active session: {e.detail}")
        return None
