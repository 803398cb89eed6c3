import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.api import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
    setup_logging,
)
from core.exceptions import MeetingValidationError
from core.middleware import CorrelationIdMiddleware
from services.ai.exceptions import GenerationServiceError


setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Structured meeting summaries, action items, follow-ups and Q&A",
    version="0.1.0",
    docs_url=None,  # mounted under /api/v1/docs
    redoc_url=None,
)

# Added last-to-first: CorrelationIdMiddleware is outermost so every error
# response already carries the correlation id.
app.add_middleware(ExceptionNormalizationMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

for exc_type in (
    Exception,
    StarletteHTTPException,
    RequestValidationError,
    MeetingValidationError,
    GenerationServiceError,
):
    app.add_exception_handler(exc_type, global_exception_handler)

app.include_router(api_router, prefix="/api/v1")

logger.info("%s started (environment=%s)", settings.APP_NAME, settings.ENVIRONMENT)


@app.get("/api/v1/docs", include_in_schema=False)
def custom_swagger_ui_html():
    return get_swagger_ui_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} API Docs"
    )


@app.get("/api/v1/redoc", include_in_schema=False)
def redoc_html():
    return get_redoc_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} API Redoc"
    )


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"{settings.APP_NAME} is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
