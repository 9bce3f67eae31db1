from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routes import auth, dashboard, messages, profiles, projects
from app import config
import logging

logging.basicConfig(level=logging.INFO)

app = FastAPI(
    redirect_slashes=False,
    title="Portfolio API",
    description="Public portfolio content and admin content management",
    version="1.0.0",
    openapi_tags=[
        {
            "name": "Admin",
            "description": "Content management behind a backend session",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.frontend_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Redirect"],
)

# Include routers
app.include_router(auth.router, prefix="/auth")
app.include_router(dashboard.router, prefix="/dashboard", tags=["Admin"])
app.include_router(profiles.router, prefix="/profiles")
app.include_router(projects.router, prefix="/projects")
app.include_router(messages.router, prefix="/messages")


@app.get("/")
def root():
    return {"message": "Portfolio API running"}
