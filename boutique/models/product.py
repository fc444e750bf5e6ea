# boutique/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry shown on the storefront.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(
        max_length=150,
        index=True,
        description="Display title",
    )

    description: str | None = Field(default=None)

    price: Decimal = Field(
        max_digits=12,
        decimal_places=2,
        description="Unit price in INR",
    )

    # readymade | unstitched | custom
    category: str = Field(
        default="readymade",
        max_length=50,
        index=True,
    )

    # Public URLs; uploading the files is handled outside this service
    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    available: bool = Field(
        default=True,
        index=True,
        description="Whether shoppers can see and buy this product",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
