# ecogest/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.cache import cache_manager
from .core.database import close_db_connections
from .core.exceptions import general_exception_handler
from .core.logging import setup_logging

from .routers import (
    health, auth, schools, identifiers, accounts, students, teachers, classes, subjects,
    exams, grades, results, announcements, payments, schedules, lesson_logs, subscriptions,
)

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting EcoGest API")

    await cache_manager.initialize()
    logger.info("Cache initialized" if settings.cache_enabled else "Cache disabled")

    yield

    logger.info("Shutting down EcoGest API")
    await cache_manager.close()
    await close_db_connections()
    logger.info("Shutdown complete")


app = FastAPI(
    title="EcoGest API - Multi-tenant School Management",
    description="Schools, login identifiers, grades and bulletins, payments and subscriptions",
    version=settings.app_version,
    lifespan=lifespan
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(schools.router)
app.include_router(identifiers.router)
app.include_router(accounts.router)
app.include_router(students.router)
app.include_router(teachers.router)
app.include_router(classes.router)
app.include_router(subjects.router)
app.include_router(exams.router)
app.include_router(grades.router)
app.include_router(results.router)
app.include_router(announcements.router)
app.include_router(payments.router)
app.include_router(schedules.router)
app.include_router(lesson_logs.router)
app.include_router(subscriptions.router)


@app.get("/")
async def root():
    return {
        "message": f"EcoGest API v{settings.app_version}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "active"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
