from api.chat.schemas import ChatRequest, ChatResponse
from config import Settings
from gemini_chat import ask_gemini

FARMOBOT_SYSTEM_INSTRUCTION = (
    "Você é o FarmoBot, assistente da FarmoLink em Angola. "
    "Use termos angolanos (Kanzas, Luanda) e sempre recomende consulta médica presencial."
)
CHAT_TEMPERATURE = 0.7


def farmobot_chat(request: ChatRequest, settings: Settings) -> ChatResponse:
    text = ask_gemini(
        request.message,
        model_name=settings.model,
        api_key=settings.api_key,
        system_instruction=FARMOBOT_SYSTEM_INSTRUCTION,
        temperature=CHAT_TEMPERATURE,
        timeout_seconds=settings.request_timeout_seconds,
    )
    if not text:
        raise ValueError("Gemini returned an empty response")
    return ChatResponse(text=text)
