# boutique/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from boutique.schemas.pricing import Money


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


# description is the only field an update may clear
NON_NULLABLE_ON_UPDATE = ("title", "price", "category", "images", "available")


class ProductCreate(SQLModel):
    """
    Payload for creating a product.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=150)
    description: str | None = None
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category: str = Field(default="readymade", max_length=50)
    images: list[str] = Field(default_factory=list)
    available: bool = True

    @field_validator("title", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; only `description` accepts null.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=150)
    description: str | None = None
    price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    category: str | None = Field(default=None, max_length=50)
    images: list[str] | None = None
    available: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def reject_null_fields(cls, data):
        if isinstance(data, dict):
            nulled = [k for k in NON_NULLABLE_ON_UPDATE if k in data and data[k] is None]
            if nulled:
                raise ValueError(f"{', '.join(nulled)} cannot be null")
        return data

    @field_validator("title", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    title: str
    description: str | None = None
    price: Money
    category: str
    images: list[str]
    available: bool
    created_at: datetime
