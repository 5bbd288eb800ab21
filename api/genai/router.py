import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from api.chat.schemas import ChatResponse, ErrorResponse
from config import Settings, get_settings
from errors import AssistantError, MethodNotAllowed, UpstreamError
from .service import genai_chat, parse_chat_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

GENAI_ERROR_MESSAGE = "Assistente temporariamente indisponível."


async def _read_json_body(request: Request) -> object:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


@router.api_route(
    "/genai",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def genai_route(request: Request, settings: Settings = Depends(get_settings)):
    if request.method != "POST":
        raise MethodNotAllowed("Method not allowed")

    chat_request = parse_chat_request(await _read_json_body(request))
    try:
        return await run_in_threadpool(genai_chat, chat_request, settings)
    except AssistantError:
        raise
    except Exception as exc:
        logger.exception("genai handler failed")
        raise UpstreamError(GENAI_ERROR_MESSAGE) from exc
