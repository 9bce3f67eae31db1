from fastapi import HTTPException
from typing import Optional

from app.config import ADMIN_LOGIN_PATH


class AuthenticationRequired(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=401,
            detail=detail,
            headers={"X-Redirect": ADMIN_LOGIN_PATH},
        )


class AuthorizationDenied(HTTPException):
    def __init__(self, detail: str = "You do not have permission to perform this action"):
        super().__init__(status_code=403, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found", back: Optional[str] = None):
        body = {"message": detail}
        if back:
            body["back"] = back
        super().__init__(status_code=404, detail=body)


class BackendFailure(HTTPException):
    """The backend rejected the request or timed out.

    Reads pass a ``retry`` path so the client can re-enter loading; writes
    echo the submitted ``form`` so nothing typed is lost.
    """

    def __init__(self, message: str, retry: Optional[str] = None, form: Optional[dict] = None, status_code: int = 502):
        body = {"message": message}
        if retry is not None:
            body["state"] = "errored"
            body["retry"] = retry
        if form is not None:
            body["form"] = form
        super().__init__(status_code=status_code, detail=body)


class ValidationFailure(HTTPException):
    def __init__(self, missing: list, form: dict = None):
        body = {
            "message": f"Missing required fields: {', '.join(missing)}",
            "missing": missing,
        }
        if form is not None:
            body["form"] = form
        super().__init__(status_code=422, detail=body)


class ConfirmationRequired(HTTPException):
    def __init__(self, what: str):
        super().__init__(
            status_code=409,
            detail=f"Are you sure you want to delete this {what}? Repeat the request with confirm=true.",
        )


class DuplicateSubmission(HTTPException):
    def __init__(self):
        super().__init__(status_code=409, detail="A submission for this form is already in progress")
