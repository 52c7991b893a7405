# taskflow/api/api.py
from fastapi import APIRouter
from taskflow.api.endpoints import admin, auth, tasks, user_logs

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
api_router.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
api_router.include_router(user_logs.router, prefix="/admin/logs", tags=["User Logs"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
