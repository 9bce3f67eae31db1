from fastapi import HTTPException
from supabase import create_client, Client
import logging

from app import config

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    supabase_url = config.supabase_url()
    supabase_key = config.supabase_key()

    if not supabase_url or not supabase_key:
        logger.error("Supabase URL or Key not found in environment variables")
        raise HTTPException(status_code=500, detail="Server configuration error")

    return create_client(supabase_url, supabase_key)


def public_supabase_client():
    """Anonymous client for the public pages."""
    return create_supabase_client()
