"""Cart models and (de)serialization of the persisted collection."""
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Union

from marketplace.errors import ERROR_INVALID_PRODUCT, MalformedCartData
from marketplace.money import to_decimal, to_json_number

# Wire field names, as written to the durable store
_FIELDS = ("id", "title", "imageUrl", "price", "quantity")
# Older app builds wrote the image under this name
_LEGACY_IMAGE_FIELD = "image_url"


@dataclass(frozen=True)
class ProductInput:
    """A product about to be added to the cart (no quantity yet)."""
    id: str
    title: str
    image_url: str
    price: Decimal

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError(f"{ERROR_INVALID_PRODUCT}: id must be a non-empty string")
        if not isinstance(self.title, str):
            raise ValueError(f"{ERROR_INVALID_PRODUCT}: title must be a string")
        if not isinstance(self.image_url, str):
            raise ValueError(f"{ERROR_INVALID_PRODUCT}: image_url must be a string")
        object.__setattr__(self, "price", to_decimal(self.price))

    @classmethod
    def coerce(cls, value: Union["ProductInput", "LineItem", Mapping[str, Any]]) -> "ProductInput":
        """Build from a ProductInput, a LineItem or a catalog mapping."""
        if isinstance(value, ProductInput):
            return value
        if isinstance(value, LineItem):
            return cls(value.id, value.title, value.image_url, value.price)
        if not isinstance(value, Mapping):
            raise ValueError(f"{ERROR_INVALID_PRODUCT}: expected a mapping, got {type(value).__name__}")
        try:
            image_url = value["imageUrl"] if "imageUrl" in value else value[_LEGACY_IMAGE_FIELD]
            return cls(
                id=value["id"],
                title=value["title"],
                image_url=image_url,
                price=value["price"],
            )
        except KeyError as e:
            raise ValueError(f"{ERROR_INVALID_PRODUCT}: missing field {e.args[0]!r}") from e


@dataclass(frozen=True)
class LineItem:
    """One product's presence in the cart."""
    id: str
    title: str
    image_url: str
    price: Decimal
    quantity: int

    def __post_init__(self):
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity < 1:
            raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")
        object.__setattr__(self, "price", to_decimal(self.price))

    @classmethod
    def from_product(cls, product: ProductInput, quantity: int = 1) -> "LineItem":
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=quantity,
        )

    def to_dict(self) -> dict:
        """Convert to the persisted record."""
        return {
            "id": self.id,
            "title": self.title,
            "imageUrl": self.image_url,
            "price": to_json_number(self.price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LineItem":
        """
        Create from a persisted record.

        Records must carry exactly the five wire fields with the right
        types; anything else is malformed.

        Raises:
            MalformedCartData: If the record does not describe a line item
        """
        if not isinstance(data, dict):
            raise MalformedCartData(f"line item must be an object, got {type(data).__name__}")

        data = dict(data)
        if "imageUrl" not in data and _LEGACY_IMAGE_FIELD in data:
            data["imageUrl"] = data.pop(_LEGACY_IMAGE_FIELD)

        missing = [name for name in _FIELDS if name not in data]
        if missing:
            raise MalformedCartData(f"line item missing fields {missing}")
        unknown = sorted(set(data) - set(_FIELDS))
        if unknown:
            raise MalformedCartData(f"line item has unknown fields {unknown}")

        item_id, title, image_url = data["id"], data["title"], data["imageUrl"]
        price, quantity = data["price"], data["quantity"]

        if not isinstance(item_id, str) or not item_id:
            raise MalformedCartData("line item id must be a non-empty string")
        if not isinstance(title, str) or not isinstance(image_url, str):
            raise MalformedCartData(f"line item {item_id!r} has non-string title or imageUrl")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise MalformedCartData(f"line item {item_id!r} price must be a number")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise MalformedCartData(f"line item {item_id!r} quantity must be a positive integer")

        try:
            return cls(id=item_id, title=title, image_url=image_url, price=price, quantity=quantity)
        except ValueError as e:
            raise MalformedCartData(str(e)) from e


def dump_products(products: Iterable[LineItem]) -> str:
    """Serialize the full collection for the durable store."""
    return json.dumps([item.to_dict() for item in products])


def load_products(raw: str) -> List[LineItem]:
    """
    Parse a persisted collection.

    Raises:
        MalformedCartData: On invalid JSON, a non-array payload,
            a bad record or a repeated id
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedCartData(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedCartData(f"expected an array, got {type(data).__name__}")

    items = [LineItem.from_dict(record) for record in data]

    seen = set()
    for item in items:
        if item.id in seen:
            raise MalformedCartData(f"duplicate line item {item.id!r}")
        seen.add(item.id)

    return items
