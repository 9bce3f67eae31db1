from typing import List

from app.schemas.profile import ProfileCard
from app.schemas.project import Project

ALL_CATEGORIES = "All"
FOUNDER_BADGE = "Founder"


# Rows may carry nulls for list/enum columns
def project_record(row: dict) -> Project:
    return Project(**{**row, "tags": row.get("tags") or []})


def profile_row(row: dict) -> dict:
    return {
        **row,
        "skills": row.get("skills") or [],
        "role": row.get("role") or "member",
        "is_active": row.get("is_active") is not False,
    }


# -------- Portfolio --------
def project_categories(projects: List[dict]) -> List[str]:
    categories = [ALL_CATEGORIES]
    for project in projects:
        category = project.get("category")
        if category and category not in categories:
            categories.append(category)
    return categories


def filter_by_category(projects: List[dict], category: str) -> List[dict]:
    if not category or category == ALL_CATEGORIES:
        return list(projects)
    return [p for p in projects if p.get("category") == category]


def detail_paragraphs(details: str) -> List[str]:
    return [line for line in (details or "").split("\n") if line.strip()]


# -------- About --------
def about_cards(profiles: List[dict]) -> List[ProfileCard]:
    rows = [profile_row(p) for p in profiles]
    # Stable: keeps the recency order inside each group
    ordered = sorted(rows, key=lambda p: p["role"] != "owner")
    cards = []
    for profile in ordered:
        card = ProfileCard(**profile)
        if card.role == "owner" and card.is_active:
            card.badge = FOUNDER_BADGE
        cards.append(card)
    return cards


# -------- Inbox --------
def filter_messages(messages: List[dict], status_filter: str) -> List[dict]:
    if status_filter in ("unread", "read"):
        return [m for m in messages if m.get("status") == status_filter]
    return list(messages)


def unread_count(messages: List[dict]) -> int:
    return sum(1 for m in messages if m.get("status") == "unread")
