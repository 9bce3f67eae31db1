from pydantic import BaseModel
from typing import Literal, Optional, Union


# --- Form mode: which backend call a submitted form turns into ---
class Create(BaseModel):
    kind: Literal["create"] = "create"


class EditExisting(BaseModel):
    kind: Literal["edit"] = "edit"
    id: str


FormMode = Union[Create, EditExisting]


def form_mode(record_id: Optional[str]) -> FormMode:
    if record_id:
        return EditExisting(id=record_id)
    return Create()


PageState = Literal["idle", "loading", "loaded", "errored"]
