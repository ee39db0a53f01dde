# backend-server/tasktracker/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from tasktracker.api.v1.api import api_router
from tasktracker.api.v1.endpoints import auth
from tasktracker.core.config import settings
from tasktracker.core.errors import TaskTrackerError
from tasktracker.db.models import Base
from tasktracker.db.session import engine

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Daily Task Tracker API")

@app.exception_handler(TaskTrackerError)
async def task_tracker_error_handler(request: Request, exc: TaskTrackerError):
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# Include the main router for all routes prefixed with /api/v1
app.include_router(api_router, prefix="/api/v1")

# Include the auth router separately for the /auth prefix
app.include_router(auth.router, prefix="/auth")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Daily Task Tracker API"}
