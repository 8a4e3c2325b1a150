import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import cache
from .config import CORS_ORIGINS, LOG_LEVEL
from .database import create_tables
from .exceptions import TaskboardError
from .logging_config import setup_logging
from .routers import auth, tasks, workspaces

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    cache.open()
    logger.info("Taskboard API started")
    try:
        yield
    finally:
        cache.close()
        logger.info("Taskboard API stopped")


# Create FastAPI app
app = FastAPI(
    title="Taskboard API",
    description="Multi-tenant task management API: workspaces, projects, tasks and tags",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskboardError)
async def taskboard_error_handler(request: Request, exc: TaskboardError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(workspaces.router, prefix="/api", tags=["workspaces"])


@app.get("/")
def read_root():
    return {"message": "Taskboard API"}

@app.get("/health")
def health_check():
    return {"status": "healthy", "cache": "up" if cache.ping() else "down"}
