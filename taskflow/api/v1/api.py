from fastapi import APIRouter
from .endpoints import auth, tasks, subtasks, storage, functions

router = APIRouter()

# Include all API endpoints
router.include_router(auth.router, prefix="/auth", tags=["authentication"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(subtasks.router, prefix="/subtasks", tags=["subtasks"])
router.include_router(storage.router, prefix="/storage", tags=["storage"])

# Serverless-style functions live outside the versioned REST prefix
functions_router = APIRouter()
functions_router.include_router(functions.router, tags=["functions"])
