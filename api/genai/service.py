import logging
from typing import Any

from pydantic import ValidationError

from api.genai.schemas import GenaiChatRequest, Product
from config import Settings
from errors import RequestValidationFailed
from gemini_chat import ask_gemini
from utils import format_price, truncate

logger = logging.getLogger(__name__)

MAX_STOCK_PRODUCTS = 50

DISCLAIMER = (
    "Nota: Sou uma inteligência artificial. Para diagnósticos precisos, "
    "consulte sempre um médico ou farmacêutico presencialmente."
)


def _parse_products(raw: Any) -> list[Product]:
    if not raw:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring products that are not a list: type=%s", type(raw).__name__)
        return []

    products: list[Product] = []
    skipped = 0
    for entry in raw[:MAX_STOCK_PRODUCTS]:
        try:
            products.append(Product.model_validate(entry))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning("Skipped %d malformed products out of %d", skipped, len(raw))
    return products


def parse_chat_request(body: Any) -> GenaiChatRequest:
    payload = body if isinstance(body, dict) else {}
    if not payload.get("message"):
        raise RequestValidationFailed("Missing message in request body")
    return GenaiChatRequest(
        message=str(payload["message"]),
        products=_parse_products(payload.get("products")),
    )


def build_stock_context(products: list[Product]) -> str:
    return ", ".join(
        f"{product.name} (Preço: Kz {format_price(product.price)})"
        for product in products[:MAX_STOCK_PRODUCTS]
    )


def build_farmobot_prompt(message: str, stock_context: str) -> str:
    stock_part = (
        f"Se o usuário perguntar sobre preços ou disponibilidade, use estas informações do nosso stock atual: {stock_context}."
        if stock_context
        else ""
    )
    return (
        "Você é o FarmoBot, o assistente inteligente da FarmoLink, a maior rede de farmácias online de Angola.\n"
        "\n"
        "DIRETRIZES DE PERSONALIDADE:\n"
        "- Seja prestativo, educado e use um tom profissional.\n"
        "- Use termos locais de Angola quando apropriado (ex: citar preços em Kwanzas).\n"
        f"{stock_part}\n"
        "- Nunca diagnostique doenças gravemente. Sugira sempre a consulta a um especialista.\n"
        "\n"
        "REGRAS DE RESPOSTA:\n"
        "- Respostas curtas e diretas ao ponto.\n"
        f'- IMPORTANTE: No final de cada resposta, adicione: "{DISCLAIMER}"\n'
        "\n"
        f"PERGUNTA DO CLIENTE: {message}"
    )


def genai_chat(request: GenaiChatRequest, settings: Settings) -> dict[str, str]:
    stock_context = build_stock_context(request.products)
    logger.info(
        "genai invocation api_key_source=%s message_len=%d products_count=%d stock_context_preview=%s",
        settings.api_key_source,
        len(request.message),
        len(request.products),
        truncate(stock_context, 200),
    )

    text = ask_gemini(
        build_farmobot_prompt(request.message, stock_context),
        model_name=settings.model,
        api_key=settings.api_key,
        timeout_seconds=settings.request_timeout_seconds,
    )
    if not text:
        raise ValueError("Gemini returned an empty response")
    return {"text": text}
