from typing import Self

from pydantic import ConfigDict, Field, RootModel, ValidationError, model_validator

from core.schemas import BaseDTO, NotBlankStr
from core.services.exceptions import MalformedSnapshotError


class ProductDTO(BaseDTO):
    model_config = ConfigDict(from_attributes=True, frozen=True, extra="ignore")

    id: NotBlankStr
    title: str
    image_url: str
    price: float = Field(ge=0, allow_inf_nan=False)


class LineItem(ProductDTO):
    quantity: int = Field(ge=1)

    @classmethod
    def from_product(cls, product: ProductDTO, quantity: int = 1) -> Self:
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=quantity,
        )

    def with_quantity(self, quantity: int) -> Self:
        return self.model_copy(update={"quantity": quantity})


class CartSnapshot(RootModel[list[LineItem]]):
    """Serialized form of the cart: a json array of line items"""

    @model_validator(mode="after")
    def _check_unique_ids(self) -> Self:
        seen: set[str] = set()
        for item in self.root:
            if item.id in seen:
                raise ValueError(f"Duplicate line item id: {item.id}")
            seen.add(item.id)
        return self

    @classmethod
    def loads(cls, payload: str | bytes) -> Self:
        try:
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise MalformedSnapshotError(str(e)) from e

    def dumps(self) -> str:
        return self.model_dump_json()
