from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import Base, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import grading_config, report_cards, submissions

# ✅ every model must be imported before create_all
from models import (  # noqa: F401
    classes, comment_templates, grade_boundaries, profiles,
    report_cards as report_card_models, students, subject_submissions, subjects,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_TITLE,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
    )

    # ✅ CORS for the admin / teacher frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ X-Latency-Ms response header
    app.add_middleware(TimingMiddleware)

    # ✅ one JSON error format for every failure
    add_error_handlers(app)

    # ✅ /v1 prefix
    app.include_router(grading_config.router,          prefix="/v1")
    app.include_router(submissions.router,             prefix="/v1")
    app.include_router(submissions.approvals_router,   prefix="/v1")
    app.include_router(report_cards.router,            prefix="/v1")
    app.include_router(report_cards.classes_router,    prefix="/v1")

    # ✅ health check
    @app.get("/health")
    def health_check():
        return {"status": "ok", "message": "API is running"}

    return app


app = create_app()


@app.on_event("startup")
def _create_tables():
    Base.metadata.create_all(bind=engine)
