import json
import logging
from typing import Any

import httpx
from google.genai import types

from api.prescription.schemas import PrescriptionRequest
from config import Settings
from errors import ParseError, RequestValidationFailed
from gemini_chat import ask_gemini
from utils import truncate

logger = logging.getLogger(__name__)

PRESCRIPTION_PROMPT = "Analise esta receita médica de Angola. Extraia os medicamentos e quantidades."
# Declared for every image, whatever the source actually serves
PRESCRIPTION_IMAGE_MIME_TYPE = "image/jpeg"

PRESCRIPTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "confidence": types.Schema(type=types.Type.NUMBER),
        "extracted_text": types.Schema(type=types.Type.STRING),
        "is_validated": types.Schema(type=types.Type.BOOLEAN),
        "suggested_items": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": types.Schema(type=types.Type.STRING),
                    "quantity": types.Schema(type=types.Type.NUMBER),
                },
                required=["name", "quantity"],
            ),
        ),
    },
    required=["confidence", "extracted_text", "is_validated", "suggested_items"],
)


def fetch_image(image_url: str, timeout_seconds: float = 60.0) -> bytes:
    logger.info("Fetching prescription image url=%s", truncate(image_url, 200))
    with httpx.Client(timeout=timeout_seconds, follow_redirects=True) as client:
        resp = client.get(image_url)
        logger.info("Image fetch returned status=%d bytes=%d", resp.status_code, len(resp.content))
        resp.raise_for_status()
        return resp.content


def build_prescription_contents(image_bytes: bytes) -> types.Content:
    # inline_data is base64-encoded by the SDK when the request is serialized
    return types.Content(
        role="user",
        parts=[
            types.Part.from_text(text=PRESCRIPTION_PROMPT),
            types.Part.from_bytes(data=image_bytes, mime_type=PRESCRIPTION_IMAGE_MIME_TYPE),
        ],
    )


def parse_analysis(text: str | None) -> dict[str, Any]:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError("Prescription analysis is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ParseError("Prescription analysis is not a JSON object")
    return data


def analyze_prescription(request: PrescriptionRequest, settings: Settings) -> dict[str, Any]:
    image_url = (request.image_url or "").strip()
    if not image_url:
        raise RequestValidationFailed("Missing imageUrl in request body")

    image_bytes = fetch_image(image_url, timeout_seconds=settings.request_timeout_seconds)
    raw = ask_gemini(
        build_prescription_contents(image_bytes),
        model_name=settings.model,
        api_key=settings.api_key,
        response_mime_type="application/json",
        response_schema=PRESCRIPTION_SCHEMA,
        timeout_seconds=settings.request_timeout_seconds,
    )
    try:
        return parse_analysis(raw)
    except ParseError:
        logger.warning("Discarding unparseable prescription analysis: %s", truncate(raw, 500))
        return {}
