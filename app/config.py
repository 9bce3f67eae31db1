from dotenv import load_dotenv
import os

load_dotenv()

DEFAULT_PROFILES_TABLE = "about"
DEFAULT_PROJECTS_TABLE = "projects"
DEFAULT_MESSAGES_TABLE = "messages"
DEFAULT_STORAGE_BUCKET = "project_images"

ADMIN_LOGIN_PATH = "/admin/login"
ADMIN_DASHBOARD_PATH = "/admin/dashboard"


def supabase_url():
    return os.getenv("SUPABASE_URL")


def supabase_key():
    return os.getenv("SUPABASE_KEY")


def profiles_table():
    return os.getenv("PROFILES_TABLE", DEFAULT_PROFILES_TABLE)


def projects_table():
    return os.getenv("PROJECTS_TABLE", DEFAULT_PROJECTS_TABLE)


def messages_table():
    return os.getenv("MESSAGES_TABLE", DEFAULT_MESSAGES_TABLE)


def storage_bucket():
    return os.getenv("STORAGE_BUCKET", DEFAULT_STORAGE_BUCKET)


def super_admin_user_id():
    # Only this identity may manage every profile regardless of authorship
    return os.getenv("SUPER_ADMIN_USER_ID", "")


def frontend_url():
    return os.getenv("FRONTEND_URL", "*")
