from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app.api.auth.router import router as auth_router
from app.api.comments.router import router as comments_router
from app.api.lessons.router import router as lessons_router
from app.api.parents.router import router as parents_router
from app.api.payments.router import router as payments_router
from app.api.recurring_lessons.router import router as recurring_lessons_router
from app.api.schedule.router import router as schedule_router
from app.api.student_portal.router import router as student_portal_router
from app.api.students.router import router as students_router
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.core.rate_limit import limiter, rate_limit_exceeded_handler


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Lesson Scheduler Backend")

    # Login throttling
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # CORS: allow the web client to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(parents_router)
    app.include_router(lessons_router)
    app.include_router(recurring_lessons_router)
    app.include_router(comments_router)
    app.include_router(payments_router)
    app.include_router(schedule_router)
    app.include_router(student_portal_router)

    return app


app = create_app()
