from typing import Any

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    # Not validated here; the server variant forwards whatever it gets
    message: Any = Field(default=None, description="Customer message sent to FarmoBot")


class ChatResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
