import logging

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.chat.router import router as chat_router
from api.genai.router import router as genai_router
from api.prescription.router import router as prescription_router
from config import Settings, get_settings
from errors import AssistantError, assistant_error_handler, http_error_handler

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})


app = FastAPI(title="FarmoLink AI", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[],              # keep empty when using regex
    allow_origin_regex=".*",       # matches any origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AssistantError, assistant_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)

app.include_router(chat_router)
app.include_router(prescription_router)
app.include_router(genai_router)


@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "ok",
        "has_api_key": settings.has_api_key,
        "api_key_source": settings.api_key_source,
        "model": settings.model,
    }


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.has_api_key:
        logger.warning("No Gemini API key configured; every AI request will fail")
    logger.info("Servidor rodando na porta %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
