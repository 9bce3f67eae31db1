from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
import uuid
import logging

from app import config
from app.dependencies.auth import user_supabase_client
from app.errors import BackendFailure, ConfirmationRequired, NotFound, ValidationFailure
from app.schemas.message import (
    MESSAGE_REQUIRED_FIELDS,
    ContactForm,
    ContactResult,
    Inbox,
    InboxFilter,
    Message,
    MessageCreate,
)
from app.services.content import filter_messages, unread_count
from app.services.supabase import public_supabase_client
from app.utils.form_fields import missing_required
from app.utils.submit_guard import submit_guard

logger = logging.getLogger(__name__)

router = APIRouter()

PAGE_SIZE = 100
SUCCESS_BANNER_SECONDS = 5


def fetch_messages(supabase):
    return supabase \
        .table(config.messages_table()) \
        .select("*") \
        .order("created_at", desc=True) \
        .limit(PAGE_SIZE) \
        .execute().data


def build_inbox(messages, status_filter: str) -> Inbox:
    return Inbox(
        filter=status_filter,
        messages=[Message(**m) for m in filter_messages(messages, status_filter)],
        total=len(messages),
        unread_count=unread_count(messages),
    )


def refreshed_inbox(supabase, status_filter: str, applied: str) -> Inbox:
    try:
        return build_inbox(fetch_messages(supabase), status_filter)
    except Exception as e:
        logger.error(f"Error refreshing messages: {str(e)}")
        raise BackendFailure(
            f"{applied}, but the inbox could not be refreshed",
            retry="/messages/admin/messages",
            status_code=503,
        )


# -------- Public: contact form --------
@router.post("/contact", response_model=ContactResult)
def send_message(form: ContactForm, supabase=Depends(public_supabase_client)):
    form_values = form.model_dump()
    missing = missing_required(form_values, MESSAGE_REQUIRED_FIELDS)
    if missing:
        raise ValidationFailure(missing, form=form_values)

    try:
        message = MessageCreate(**form_values)
    except ValidationError:
        raise ValidationFailure(["email"], form=form_values)

    with submit_guard.hold(("contact", message.email)):
        try:
            supabase.table(config.messages_table()).insert({
                "id": str(uuid.uuid4()),
                **message.model_dump(),
            }).execute()
        except Exception as e:
            logger.error(f"Error sending message: {str(e)}")
            raise BackendFailure(
                "Failed to send message. Please try again or email us directly.",
                form=form_values,
            )

    logger.info(f"Stored contact message from {message.email}")
    return ContactResult(success=True, form=ContactForm(), banner_seconds=SUCCESS_BANNER_SECONDS)


# -------- Admin: inbox --------
@router.get("/admin/messages", response_model=Inbox)
def get_inbox(status: InboxFilter = Query("all", alias="filter"), context=Depends(user_supabase_client)):
    try:
        messages = fetch_messages(context["supabase"])
    except Exception as e:
        logger.error(f"Error fetching messages: {str(e)}")
        raise BackendFailure("Error loading messages", retry="/messages/admin/messages", status_code=503)
    return build_inbox(messages, status)


# One-way: there is no route back to unread
@router.patch("/admin/message/{message_id}/read", response_model=Inbox)
def mark_as_read(
    message_id: str,
    status: InboxFilter = Query("all", alias="filter"),
    context=Depends(user_supabase_client),
):
    supabase = context["supabase"]

    try:
        response = supabase \
            .table(config.messages_table()) \
            .update({"status": "read"}) \
            .eq("id", message_id) \
            .execute()
    except Exception as e:
        logger.error(f"Error updating message: {str(e)}")
        raise BackendFailure("Error updating message")

    if not response.data:
        raise NotFound("Message not found")

    return refreshed_inbox(supabase, status, "Message marked as read")


@router.delete("/admin/message/{message_id}", response_model=Inbox)
def delete_message(
    message_id: str,
    confirm: bool = Query(False),
    status: InboxFilter = Query("all", alias="filter"),
    context=Depends(user_supabase_client),
):
    if not confirm:
        raise ConfirmationRequired("message")

    supabase = context["supabase"]
    table = config.messages_table()

    try:
        existing = supabase.table(table).select("id").eq("id", message_id).execute()
    except Exception as e:
        logger.error(f"Error fetching message {message_id}: {str(e)}")
        raise BackendFailure("Error deleting message", retry="/messages/admin/messages", status_code=503)
    if not existing.data:
        raise NotFound("Message not found")

    try:
        supabase.table(table).delete().eq("id", message_id).execute()
    except Exception as e:
        logger.error(f"Error deleting message: {str(e)}")
        raise BackendFailure("Error deleting message")

    logger.info(f"Deleted message {message_id}")
    return refreshed_inbox(supabase, status, "Message deleted")
