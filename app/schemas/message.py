from pydantic import BaseModel, EmailStr
from typing import List, Literal, Optional
from datetime import datetime

MESSAGE_REQUIRED_FIELDS = ("name", "email", "message")

MessageStatus = Literal["unread", "read"]
InboxFilter = Literal["all", "unread", "read"]


# --- Messages ---
class Message(BaseModel):
    id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = ""
    subject: Optional[str] = ""
    message: str
    status: MessageStatus = "unread"
    created_at: Optional[datetime] = None


class ContactForm(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""


class MessageCreate(BaseModel):
    name: str
    email: EmailStr
    phone: str = ""
    subject: str = ""
    message: str
    status: MessageStatus = "unread"


class ContactResult(BaseModel):
    success: bool
    form: ContactForm
    banner_seconds: int


class Inbox(BaseModel):
    filter: InboxFilter
    messages: List[Message]
    total: int
    unread_count: int
