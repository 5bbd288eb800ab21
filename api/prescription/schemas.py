from pydantic import BaseModel, ConfigDict, Field


class PrescriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl", description="Public URL of the prescription image")


class SuggestedItem(BaseModel):
    name: str
    quantity: float


class PrescriptionAnalysis(BaseModel):
    """Shape Gemini is asked to produce; the endpoint may also return ``{}``."""

    confidence: float
    extracted_text: str
    is_validated: bool
    suggested_items: list[SuggestedItem]
