from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference

from voting_bracket.apps.api.routers.candidate import candidate_router
from voting_bracket.apps.api.routers.tournament import tournament_router
from voting_bracket.tournament import (
    CompletionFailed,
    EmptySession,
    InvalidReference,
    NotFound,
)
from voting_bracket.util.logging import configure_logging, get_logger

from .config import settings
from .lifespan import lifespan

configure_logging(humanize=settings.HUMANIZE_LOGS, level=settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tournament_router)
app.include_router(candidate_router)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": f"{exc.kind.capitalize()} not found"},
    )


@app.exception_handler(InvalidReference)
async def invalid_reference_handler(request: Request, exc: InvalidReference):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


@app.exception_handler(EmptySession)
async def empty_session_handler(request: Request, exc: EmptySession):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "No votes found in session"},
    )


@app.exception_handler(CompletionFailed)
async def completion_failed_handler(request: Request, exc: CompletionFailed):
    logger.error("Tournament completion failed", session_id=exc.session_id)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to complete tournament"},
    )


@app.get("/api/health")
def health():
    return {"status": "OK"}


@app.get("/scalar", include_in_schema=False)
async def scalar_docs():
    return get_scalar_api_reference(
        openapi_url="/openapi.json",
        title="Voting Bracket API",
    )
