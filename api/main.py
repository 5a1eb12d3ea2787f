"""
FastAPI application for the Interview Assistant.
Provides API endpoints for a browser-based candidate and interviewer frontend.

Run with: uvicorn api.main:app --reload --port 8000
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CORS_ORIGINS, EVALUATOR_MODE
from api.routes.interview import router as interview_router
from errors import InterviewAssistantError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Interview Assistant API",
    description="API for resume upload, timed interviews and the interviewer dashboard",
    version="1.0.0"
)

# Dev frontends by default; override with CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InterviewAssistantError)
async def interview_assistant_exception_handler(request: Request, exc: InterviewAssistantError) -> JSONResponse:
    """Report domain errors with their status code and message."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "details": exc.details
        }
    )


# Include routers
app.include_router(interview_router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "Interview Assistant API"}


@app.get("/health")
async def health():
    """Liveness probe; also reports which evaluator new sessions use."""
    return {"status": "healthy", "evaluator_mode": EVALUATOR_MODE}
