from fastapi import APIRouter, Depends
import logging

from app import config
from app.dependencies.auth import user_supabase_client
from app.errors import BackendFailure
from app.services.authorization import is_owner
from app.services.content import unread_count

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def get_dashboard(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    identity = context["identity"]

    try:
        projects = supabase.table(config.projects_table()).select("id").execute().data
    except Exception as e:
        logger.error(f"Error fetching stats: {str(e)}")
        raise BackendFailure("Error loading dashboard", retry="/dashboard/", status_code=503)

    # A missing messages table should not take the dashboard down
    try:
        messages = supabase.table(config.messages_table()).select("id, status").execute().data
    except Exception as e:
        logger.warning(f"Messages not available: {str(e)}")
        messages = []

    return {
        "user": identity,
        "is_owner": is_owner(identity),
        "stats": {
            "projects": len(projects),
            "messages": len(messages),
            "unread_messages": unread_count(messages),
        },
    }
