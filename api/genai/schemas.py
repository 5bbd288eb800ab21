from pydantic import BaseModel, Field


class Product(BaseModel):
    name: str
    price: int | float | str


class GenaiChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    products: list[Product] = Field(default_factory=list)
