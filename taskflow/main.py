import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlmodel import SQLModel
from .api.v1.api import router as api_router, functions_router
from .api.v1.endpoints.storage import PUBLIC_PREFIX
from .core.config import settings
from .core.logging_setup import setup_logging
from .db.session import sync_engine
from . import models  # noqa: F401  registers every table on SQLModel.metadata

logger = logging.getLogger(__name__)

# Create database tables on startup
def create_db_and_tables():
    SQLModel.metadata.create_all(sync_engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, db_echo=settings.DB_ECHO)
    create_db_and_tables()
    logger.info("%s started", settings.PROJECT_NAME)
    yield

app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Tasks, subtasks, profiles and AI subtask generation",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(functions_router, prefix="/functions/v1")

# Public object storage (avatars)
Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.STORAGE_DIR), name="storage")

@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
