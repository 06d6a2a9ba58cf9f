import logging

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .dependencies import get_generation_client, get_narration_client
from .routers.catalog import router as catalog_router
from .routers.narration import router as narration_router
from .routers.stories import router as stories_router
from .services.narration_service import NarrationClient
from .services.story_service import StoryGenerationClient

load_dotenv()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="DreamTales API", description="Personalised bedtime stories with narration")

app.include_router(stories_router)
app.include_router(narration_router)
app.include_router(catalog_router)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    logger.info("Rejected %s %s: %s", request.method, request.url.path, messages)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": f"Invalid request: {', '.join(messages)}"},
    )


@app.get("/")
def root():
    return {"message": "API is running!"}


@app.get("/health")
def health(
    generation: StoryGenerationClient = Depends(get_generation_client),
    narration: NarrationClient = Depends(get_narration_client),
) -> dict:
    return {"status": "ok", "generation": generation.configured, "narration": narration.configured}
