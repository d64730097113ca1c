"""
Cart API Pydantic Models

Wire names follow the persisted record (imageUrl).
"""
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from marketplace.cart import LineItem
from marketplace.money import to_json_number


class AddToCartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    title: str
    image_url: str = Field(..., alias="imageUrl")
    price: float


class LineItemOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    image_url: str = Field(..., alias="imageUrl")
    price: float
    quantity: int

    @classmethod
    def from_item(cls, item: LineItem) -> "LineItemOut":
        return cls(
            id=item.id,
            title=item.title,
            image_url=item.image_url,
            price=to_json_number(item.price),
            quantity=item.quantity,
        )


class CartResponse(BaseModel):
    products: List[LineItemOut]
    hydrated: bool
