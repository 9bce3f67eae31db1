from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from typing import List, Optional
import uuid
import logging

from app import config
from app.dependencies.auth import user_supabase_client
from app.errors import BackendFailure, ConfirmationRequired, NotFound, ValidationFailure
from app.schemas.common import EditExisting, FormMode, form_mode
from app.schemas.project import (
    PROJECT_REQUIRED_FIELDS,
    PortfolioPage,
    Project,
    ProjectDetail,
    ProjectForm,
)
from app.services.content import (
    ALL_CATEGORIES,
    detail_paragraphs,
    filter_by_category,
    project_categories,
    project_record,
)
from app.services.storage import resolve_image_url
from app.services.supabase import public_supabase_client
from app.utils.fetch_state import FetchState
from app.utils.form_fields import join_list, missing_required, split_list
from app.utils.submit_guard import submit_guard

logger = logging.getLogger(__name__)

router = APIRouter()

PAGE_SIZE = 100


def fetch_projects(supabase):
    return supabase \
        .table(config.projects_table()) \
        .select("*") \
        .order("created_at", desc=True) \
        .limit(PAGE_SIZE) \
        .execute().data


def project_form(
    title: str = Form(""),
    description: str = Form(""),
    details: str = Form(""),
    category: str = Form(""),
    tags: str = Form(""),
    image_url: str = Form(""),
) -> ProjectForm:
    return ProjectForm(
        title=title,
        description=description,
        details=details,
        category=category,
        tags=tags,
        image_url=image_url,
    )


# -------- Public: portfolio --------
@router.get("/portfolio", response_model=PortfolioPage)
def get_portfolio(category: str = Query(ALL_CATEGORIES), supabase=Depends(public_supabase_client)):
    page = FetchState(retry_path="/projects/portfolio").load(lambda: fetch_projects(supabase))
    if page.state == "errored":
        raise BackendFailure(
            "Failed to load projects. Please try again later.",
            retry=page.retry_path,
            status_code=503,
        )

    projects = page.data or []
    return PortfolioPage(
        state=page.state,
        categories=project_categories(projects),
        selected=category,
        projects=[project_record(p) for p in filter_by_category(projects, category)],
        empty=not projects,
        empty_message=None if projects else "No projects yet",
    )


# -------- Public: project detail --------
@router.get("/project/{project_id}", response_model=ProjectDetail)
def get_project(project_id: str, supabase=Depends(public_supabase_client)):
    page = FetchState(retry_path=f"/projects/project/{project_id}").load(
        lambda: supabase.table(config.projects_table()).select("*").eq("id", project_id).execute().data
    )
    if page.state == "errored":
        raise BackendFailure("Project not found or failed to load.", retry=page.retry_path, status_code=503)
    if not page.data:
        raise NotFound("The project you're looking for doesn't exist.", back="/portfolio")

    project = project_record(page.data[0])
    return ProjectDetail(**project.model_dump(), paragraphs=detail_paragraphs(project.details))


# -------- Admin: management --------
@router.get("/admin/projects", response_model=List[Project])
def list_projects(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        projects = fetch_projects(supabase)
    except Exception as e:
        logger.error(f"Error fetching projects: {str(e)}")
        raise BackendFailure("Error loading projects", retry="/projects/admin/projects", status_code=503)
    return [project_record(p) for p in projects]


@router.get("/admin/project/{project_id}/form")
def get_project_form(project_id: str, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        rows = supabase.table(config.projects_table()).select("*").eq("id", project_id).execute().data
    except Exception as e:
        logger.error(f"Error fetching project {project_id}: {str(e)}")
        raise BackendFailure(
            "Error loading project",
            retry=f"/projects/admin/project/{project_id}/form",
            status_code=503,
        )
    if not rows:
        raise NotFound("Project not found")

    project = project_record(rows[0])
    form = ProjectForm(
        title=project.title,
        description=project.description,
        details=project.details,
        category=project.category,
        tags=join_list(project.tags),
        image_url=project.image_url or "",
    )
    return {"mode": form_mode(project.id), "form": form}


def save_project(mode: FormMode, form: ProjectForm, image: Optional[UploadFile], context):
    supabase = context["supabase"]
    user_id = context["user_id"]
    table = config.projects_table()

    form_values = form.model_dump()
    missing = missing_required(form_values, PROJECT_REQUIRED_FIELDS)
    if missing:
        raise ValidationFailure(missing, form=form_values)

    with submit_guard.hold((user_id, "project", mode.kind)):
        try:
            # Upload first: the record is written with the resulting URL
            image_url = resolve_image_url(supabase, image, form.image_url)

            project_data = {
                "title": form.title,
                "description": form.description,
                "details": form.details,
                "category": form.category,
                "tags": split_list(form.tags),
            }
            if image_url or not isinstance(mode, EditExisting):
                project_data["image_url"] = image_url

            if isinstance(mode, EditExisting):
                response = supabase.table(table).update(project_data).eq("id", mode.id).execute()
            else:
                project_data["id"] = str(uuid.uuid4())
                response = supabase.table(table).insert(project_data).execute()
        except Exception as e:
            logger.error(f"Error saving project: {str(e)}")
            raise BackendFailure(f"Error saving project: {str(e)}", form=form_values)

    if not response.data:
        raise NotFound("Project not found")

    logger.info(f"Saved project {response.data[0].get('id')} ({mode.kind}) for user {user_id}")
    return project_record(response.data[0])


@router.post("/admin/project", response_model=Project)
def create_project(
    form: ProjectForm = Depends(project_form),
    image: Optional[UploadFile] = File(None),
    context=Depends(user_supabase_client),
):
    return save_project(form_mode(None), form, image, context)


@router.put("/admin/project/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    form: ProjectForm = Depends(project_form),
    image: Optional[UploadFile] = File(None),
    context=Depends(user_supabase_client),
):
    return save_project(form_mode(project_id), form, image, context)


@router.delete("/admin/project/{project_id}", response_model=List[Project])
def delete_project(project_id: str, confirm: bool = Query(False), context=Depends(user_supabase_client)):
    if not confirm:
        raise ConfirmationRequired("project")

    supabase = context["supabase"]
    table = config.projects_table()

    try:
        existing = supabase.table(table).select("id").eq("id", project_id).execute()
    except Exception as e:
        logger.error(f"Error fetching project {project_id}: {str(e)}")
        raise BackendFailure("Error deleting project", retry="/projects/admin/projects", status_code=503)
    if not existing.data:
        raise NotFound("Project not found")

    try:
        supabase.table(table).delete().eq("id", project_id).execute()
    except Exception as e:
        logger.error(f"Error deleting project: {str(e)}")
        raise BackendFailure("Error deleting project")

    logger.info(f"Deleted project {project_id}")
    try:
        return [project_record(p) for p in fetch_projects(supabase)]
    except Exception as e:
        logger.error(f"Error refreshing projects after delete: {str(e)}")
        raise BackendFailure(
            "Project deleted, but the list could not be refreshed",
            retry="/projects/admin/projects",
            status_code=503,
        )
