from typing import Iterable, List


def split_list(text: str) -> List[str]:
    """Turn comma separated form text into a list, dropping blank entries."""
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def join_list(items) -> str:
    if not isinstance(items, list):
        return ""
    return ", ".join(items)


def missing_required(values: dict, required: Iterable[str]) -> List[str]:
    return [field for field in required if not str(values.get(field) or "").strip()]
