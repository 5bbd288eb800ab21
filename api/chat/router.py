import logging

from fastapi import APIRouter, Depends

from api.chat.schemas import ChatRequest, ChatResponse, ErrorResponse
from config import Settings, get_settings
from errors import UpstreamError
from .service import farmobot_chat

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai")

CHAT_ERROR_MESSAGE = "Erro no processamento do chat"


@router.post("/chat", response_model=ChatResponse, responses={500: {"model": ErrorResponse}})
def chat_route(request: ChatRequest | None = None, settings: Settings = Depends(get_settings)) -> ChatResponse:
    try:
        return farmobot_chat(request or ChatRequest(), settings)
    except Exception as exc:
        logger.exception("Chat request failed")
        raise UpstreamError(CHAT_ERROR_MESSAGE) from exc
