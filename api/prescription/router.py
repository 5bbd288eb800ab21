import logging
from typing import Any

from fastapi import APIRouter, Depends

from api.chat.schemas import ErrorResponse
from api.prescription.schemas import PrescriptionAnalysis, PrescriptionRequest
from config import Settings, get_settings
from errors import RequestValidationFailed, UpstreamError
from .service import analyze_prescription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai")

VISION_ERROR_MESSAGE = "Erro na análise de visão"


@router.post(
    "/analyze-prescription",
    responses={
        200: {"model": PrescriptionAnalysis},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def analyze_prescription_route(
    request: PrescriptionRequest | None = None,
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    try:
        return analyze_prescription(request or PrescriptionRequest(), settings)
    except RequestValidationFailed:
        raise
    except Exception as exc:
        logger.exception("Prescription analysis failed")
        raise UpstreamError(VISION_ERROR_MESSAGE) from exc
