import logging

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config, schemas
from .errors import MalformedRequestError, QuizGenerationError
from .generator import GeminiClient, ModelClient, QuizRequestPipeline

logging.basicConfig(
    level=config.settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quiz Engine",
    description="Generates multiple-choice quizzes from a topic, text or image using Gemini.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def get_model_client() -> ModelClient:
    """Dependency providing the Gemini client; fails when no key is configured."""
    return GeminiClient(
        config.settings.GEMINI_API_KEY,
        timeout=config.settings.MODEL_TIMEOUT_SECONDS,
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    body = schemas.ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(QuizGenerationError)
async def quiz_generation_error_handler(request: Request, exc: QuizGenerationError):
    logger.error(f"API Error [{exc.kind}]: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    error = MalformedRequestError(f"Malformed request: {problems}")
    logger.warning(f"API Error [{error.kind}]: {error.message}")
    return error_response(error.status_code, error.message)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"API Error: {exc}")
    return error_response(500, str(exc) or "Internal Server Error")


# --- API Endpoints ---
@app.get("/")
def read_root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Quiz Engine is running!"}


@app.options("/api/generate")
def generate_quiz_preflight():
    return Response(status_code=200)


@app.post("/api/generate")
def generate_quiz(
    request: schemas.GenerationRequest,
    client: ModelClient = Depends(get_model_client),
):
    """
    Generates a quiz from a topic, a piece of text or an image using the Gemini API.
    The parsed quiz document is returned as-is.
    """
    pipeline = QuizRequestPipeline(
        client,
        config.settings.GEMINI_MODELS,
        max_text_chars=config.settings.MAX_TEXT_CHARS,
        include_summary=config.settings.INCLUDE_SUMMARY,
        strict=config.settings.STRICT_QUIZ_VALIDATION,
    )
    return pipeline.generate_quiz(request)
