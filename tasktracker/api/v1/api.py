# backend-server/tasktracker/api/v1/api.py
from fastapi import APIRouter
from tasktracker.api.v1.endpoints import admin, dashboard, tasks, teams, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(tasks.router, tags=["Tasks"])
api_router.include_router(teams.router, prefix="/teams", tags=["Teams"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
