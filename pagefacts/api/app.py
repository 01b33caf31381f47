"""HTTP entry point: POST /api/analyze."""

from __future__ import annotations

import logging
import os

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from pagefacts.config import LOG_LEVEL, Credentials
from pagefacts.graph.workflow import analyze

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "A valid URL and query are required"

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class AnalyzeRequest(BaseModel):
    url: str
    query: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        """Accept only http(s) URLs, but keep the string exactly as sent."""
        value = value.strip()
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError("url must be an http or https URL") from exc
        return value


def get_credentials() -> Credentials:
    """Read credentials per request so a missing key is reported, not fatal at startup."""
    return Credentials.from_env()


router = APIRouter()


@router.post("/api/analyze")
async def analyze_endpoint(
    req: AnalyzeRequest,
    credentials: Credentials = Depends(get_credentials),
) -> JSONResponse:
    """Analyze the page at ``url`` for claims relevant to ``query``."""
    query = req.query.strip()
    if not query:
        return _validation_failure()

    response = await analyze(req.url, query, credentials)
    status_code = 500 if response.status == "error" else 200
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


def _validation_failure() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"status": "error", "message": VALIDATION_MESSAGE},
    )


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _validation_failure()


def create_app() -> FastAPI:
    app = FastAPI(title="pagefacts")
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    return app


app = create_app()


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
