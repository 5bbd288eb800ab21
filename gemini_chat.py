import logging
from typing import Any

from google import genai
from google.genai import types

from config import DEFAULT_MODEL
from utils import truncate

logger = logging.getLogger(__name__)


def _require_api_key(api_key: str | None) -> str:
    resolved = (api_key or "").strip()
    if not resolved:
        raise RuntimeError(
            "No API key found. Set API_KEY (or GEMINI_API_KEY / GOOGLE_API_KEY) in your environment or .env file."
        )
    return resolved


def _describe_contents(contents: Any) -> str:
    if isinstance(contents, str):
        return f"prompt_len={len(contents)}"
    if isinstance(contents, types.Content):
        return f"parts={len(contents.parts or [])}"
    return f"contents_type={type(contents).__name__}"


def _build_config(
    system_instruction: str | None,
    temperature: float | None,
    response_mime_type: str | None,
    response_schema: types.Schema | None,
) -> types.GenerateContentConfig | None:
    options: dict[str, Any] = {}
    if system_instruction:
        options["system_instruction"] = system_instruction
    if temperature is not None:
        options["temperature"] = temperature
    if response_mime_type:
        options["response_mime_type"] = response_mime_type
    if response_schema is not None:
        options["response_schema"] = response_schema
    return types.GenerateContentConfig(**options) if options else None


def ask_gemini(
    contents: Any,
    model_name: str = DEFAULT_MODEL,
    api_key: str | None = None,
    *,
    system_instruction: str | None = None,
    temperature: float | None = None,
    response_mime_type: str | None = None,
    response_schema: types.Schema | None = None,
    timeout_seconds: float | None = None,
) -> str:
    resolved_api_key = _require_api_key(api_key)
    try:
        logger.info("Calling Gemini model=%s %s", model_name, _describe_contents(contents))
        if isinstance(contents, str):
            logger.debug("Prompt preview: %s", truncate(contents, 400))

        http_options = None
        if timeout_seconds:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))

        client = genai.Client(api_key=resolved_api_key, http_options=http_options)
        response = client.models.generate_content(
            model=model_name,
            contents=contents,
            config=_build_config(system_instruction, temperature, response_mime_type, response_schema),
        )
        text = (response.text or "").strip()
        logger.info("Gemini response received model=%s resp_len=%d", model_name, len(text))
        logger.debug("Response preview: %s", truncate(text, 1000))
        return text
    except Exception:
        logger.exception("Gemini request failed for model=%s", model_name)
        raise
