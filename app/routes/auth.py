from fastapi import APIRouter, Depends, HTTPException
import logging

from app.config import ADMIN_DASHBOARD_PATH, ADMIN_LOGIN_PATH
from app.dependencies.auth import optional_identity, user_supabase_client
from app.schemas.auth import Identity, LoginRequest, LoginResponse, SessionCheck
from app.services.authorization import is_owner
from app.services.supabase import create_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter()


def login_error(e: Exception) -> HTTPException:
    """Map an auth service failure to a message the login form can show."""
    status = getattr(e, "status", None)
    code = getattr(e, "code", None)
    message = str(e).lower()

    if code == "invalid_credentials" or (status in (400, 401) and "invalid" in message):
        return HTTPException(status_code=401, detail="Invalid email or password")
    if code == "user_not_found" or ("user" in message and "not found" in message):
        return HTTPException(status_code=404, detail="No account found with this email")
    return HTTPException(status_code=502, detail="Login failed. Please try again.")


# Login page mount: an existing session skips the form
@router.get("/login", response_model=SessionCheck)
def check_session(identity=Depends(optional_identity)):
    if identity is None:
        return SessionCheck(authenticated=False)
    return SessionCheck(authenticated=True, redirect=ADMIN_DASHBOARD_PATH, user=identity)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest):
    supabase = create_supabase_client()
    try:
        auth_res = supabase.auth.sign_in_with_password({
            "email": credentials.email,
            "password": credentials.password,
        })
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise login_error(e)

    if not auth_res.session or not auth_res.user:
        raise HTTPException(status_code=502, detail="Login failed. Please try again.")

    logger.info(f"Login successful for user {auth_res.user.id}")
    return LoginResponse(
        access_token=auth_res.session.access_token,
        refresh_token=auth_res.session.refresh_token,
        user=Identity(id=auth_res.user.id, email=auth_res.user.email),
        redirect=ADMIN_DASHBOARD_PATH,
    )


@router.post("/logout")
def logout(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        supabase.auth.admin.sign_out(context["token"])
    except Exception as e:
        logger.error(f"Logout error: {str(e)}")
        raise HTTPException(status_code=502, detail="Logout failed. Please try again.")
    logger.info(f"Logged out user {context['user_id']}")
    return {"message": "Logged out", "redirect": ADMIN_LOGIN_PATH}


@router.get("/me")
def get_me(context=Depends(user_supabase_client)):
    identity = context["identity"]
    return {"user": identity, "is_owner": is_owner(identity)}
