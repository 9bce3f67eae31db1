from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from typing import List, Literal, Optional
import uuid
import logging

from app import config
from app.dependencies.auth import user_supabase_client
from app.errors import BackendFailure, ConfirmationRequired, NotFound, ValidationFailure
from app.schemas.common import EditExisting, FormMode, form_mode
from app.schemas.profile import (
    DEFAULT_PROFILE,
    PROFILE_REQUIRED_FIELDS,
    AboutPage,
    ManagedProfile,
    ProfileCard,
    ProfileForm,
)
from app.services.authorization import (
    Allowed,
    apply_profile_write_policy,
    authorize_profile_change,
    require,
)
from app.services.content import about_cards, profile_row
from app.services.storage import resolve_image_url
from app.services.supabase import public_supabase_client
from app.utils.fetch_state import FetchState
from app.utils.form_fields import join_list, missing_required, split_list
from app.utils.submit_guard import submit_guard

logger = logging.getLogger(__name__)

router = APIRouter()


def profile_form(
    name: str = Form(""),
    status: str = Form(""),
    bio: str = Form(""),
    current_project: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    location: str = Form(""),
    github: str = Form(""),
    linkedin: str = Form(""),
    profile_image: str = Form(""),
    skills: str = Form(""),
    education: str = Form(""),
    experience: str = Form(""),
    role: Optional[Literal["owner", "member"]] = Form(None),
    is_active: Optional[bool] = Form(None),
    user_id: Optional[str] = Form(None),
) -> ProfileForm:
    return ProfileForm(
        name=name,
        status=status,
        bio=bio,
        current_project=current_project,
        email=email,
        phone=phone,
        location=location,
        github=github,
        linkedin=linkedin,
        profile_image=profile_image,
        skills=skills,
        education=education,
        experience=experience,
        role=role,
        is_active=is_active,
        user_id=user_id,
    )


def fetch_profile(supabase, profile_id: str, retry: Optional[str] = None, form: Optional[dict] = None) -> dict:
    try:
        rows = supabase.table(config.profiles_table()).select("*").eq("id", profile_id).execute().data
    except Exception as e:
        logger.error(f"Error fetching profile {profile_id}: {str(e)}")
        raise BackendFailure(
            "Error loading profile",
            retry=retry,
            form=form,
            status_code=503 if retry else 502,
        )

    if not rows:
        raise NotFound("Profile not found")
    return rows[0]


def fetch_all_profiles(supabase):
    return supabase \
        .table(config.profiles_table()) \
        .select("*") \
        .order("created_at", desc=True) \
        .execute().data


def managed_profiles(supabase, identity) -> List[ManagedProfile]:
    return [
        ManagedProfile(
            **profile_row(p),
            can_edit=isinstance(authorize_profile_change(identity, p), Allowed),
        )
        for p in fetch_all_profiles(supabase)
    ]


# -------- Public: about page --------
@router.get("/about", response_model=AboutPage)
def get_about(supabase=Depends(public_supabase_client)):
    page = FetchState(retry_path="/profiles/about").load(
        lambda: supabase
        .table(config.profiles_table())
        .select("*")
        .eq("is_active", True)
        .order("created_at", desc=True)
        .execute().data
    )
    if page.state == "errored":
        raise BackendFailure("Failed to load the about section.", retry=page.retry_path, status_code=503)

    if not page.data:
        return AboutPage(state=page.state, profiles=[DEFAULT_PROFILE], empty=True)
    return AboutPage(state=page.state, profiles=about_cards(page.data), empty=False)


# -------- Admin: management --------
@router.get("/admin/profiles", response_model=List[ManagedProfile])
def list_profiles(context=Depends(user_supabase_client)):
    try:
        return managed_profiles(context["supabase"], context["identity"])
    except Exception as e:
        logger.error(f"Error fetching about data: {str(e)}")
        raise BackendFailure("Error loading profiles", retry="/profiles/admin/profiles", status_code=503)


@router.get("/admin/profile/{profile_id}/form")
def get_profile_form(profile_id: str, context=Depends(user_supabase_client)):
    record = profile_row(fetch_profile(
        context["supabase"], profile_id, retry=f"/profiles/admin/profile/{profile_id}/form"
    ))

    form = ProfileForm(
        **{field: record.get(field) or "" for field in (
            "name", "status", "bio", "current_project", "email", "phone",
            "location", "github", "linkedin", "profile_image", "education", "experience",
        )},
        skills=join_list(record["skills"]),
        role=record["role"],
        is_active=record["is_active"],
        user_id=record.get("user_id"),
    )
    decision = authorize_profile_change(context["identity"], record)
    return {
        "mode": form_mode(record.get("id")),
        "form": form,
        "can_edit": isinstance(decision, Allowed),
    }


def save_profile(mode: FormMode, form: ProfileForm, image: Optional[UploadFile], context):
    supabase = context["supabase"]
    identity = context["identity"]
    table = config.profiles_table()

    form_values = form.model_dump()

    existing = None
    if isinstance(mode, EditExisting):
        existing = fetch_profile(supabase, mode.id, form=form_values)
        # Refused before validation or any write
        require(authorize_profile_change(identity, existing))

    missing = missing_required(form_values, PROFILE_REQUIRED_FIELDS)
    if missing:
        raise ValidationFailure(missing, form=form_values)

    with submit_guard.hold((identity.id, "profile", mode.kind)):
        try:
            profile_image = resolve_image_url(supabase, image, form.profile_image)

            submitted = {
                "name": form.name,
                "status": form.status,
                "bio": form.bio,
                "current_project": form.current_project,
                "email": form.email,
                "phone": form.phone,
                "location": form.location,
                "github": form.github,
                "linkedin": form.linkedin,
                "skills": split_list(form.skills),
                "education": form.education,
                "experience": form.experience,
                "role": form.role,
                "is_active": form.is_active,
                "user_id": form.user_id,
            }
            if profile_image or existing is None:
                submitted["profile_image"] = profile_image
            profile_data = apply_profile_write_policy(identity, submitted, existing)

            if isinstance(mode, EditExisting):
                response = supabase.table(table).update(profile_data).eq("id", mode.id).execute()
            else:
                profile_data["id"] = str(uuid.uuid4())
                response = supabase.table(table).insert(profile_data).execute()
        except Exception as e:
            logger.error(f"Error saving about data: {str(e)}")
            raise BackendFailure(f"Error saving about data: {str(e)}", form=form_values)

    if not response.data:
        raise NotFound("Profile not found")

    logger.info(f"Saved profile {response.data[0].get('id')} ({mode.kind}) for user {identity.id}")
    return ProfileCard(**profile_row(response.data[0]))


@router.post("/admin/profile", response_model=ProfileCard)
def create_profile(
    form: ProfileForm = Depends(profile_form),
    image: Optional[UploadFile] = File(None),
    context=Depends(user_supabase_client),
):
    return save_profile(form_mode(None), form, image, context)


@router.put("/admin/profile/{profile_id}", response_model=ProfileCard)
def update_profile(
    profile_id: str,
    form: ProfileForm = Depends(profile_form),
    image: Optional[UploadFile] = File(None),
    context=Depends(user_supabase_client),
):
    return save_profile(form_mode(profile_id), form, image, context)


@router.delete("/admin/profile/{profile_id}", response_model=List[ManagedProfile])
def delete_profile(profile_id: str, confirm: bool = Query(False), context=Depends(user_supabase_client)):
    if not confirm:
        raise ConfirmationRequired("profile")

    supabase = context["supabase"]
    identity = context["identity"]

    existing = fetch_profile(supabase, profile_id, retry="/profiles/admin/profiles")
    require(authorize_profile_change(identity, existing))

    try:
        supabase.table(config.profiles_table()).delete().eq("id", profile_id).execute()
    except Exception as e:
        logger.error(f"Error deleting profile: {str(e)}")
        raise BackendFailure("Error deleting profile")

    logger.info(f"Deleted profile {profile_id}")
    try:
        return managed_profiles(supabase, identity)
    except Exception as e:
        logger.error(f"Error refreshing profiles after delete: {str(e)}")
        raise BackendFailure(
            "Profile deleted, but the list could not be refreshed",
            retry="/profiles/admin/profiles",
            status_code=503,
        )
