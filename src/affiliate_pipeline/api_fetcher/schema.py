from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    DECLINED = "declined"


class ValueType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class ApiRequest:
    """One logical provider request: the path that gets signed plus its query string."""

    endpoint: str
    params: Dict[str, Any] = field(default_factory=dict)


class Program(BaseModel):
    """An advertiser program on the network."""

    model_config = ConfigDict(frozen=True)

    network: str = Field(..., description="Key of the owning network")
    program_id: str = Field(..., description="Upstream program @id")
    name: str = Field(..., description="Display name")

    @field_validator("program_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v


class Product(BaseModel):
    """
    A catalog item as returned by product search or lookup.

    `tracking_url` is derived from `details_url` and the caller's tracking
    code; `raw` keeps the full upstream item for debugging.
    """

    model_config = ConfigDict(frozen=True)

    program: Program
    product_id: str = Field(..., description="Upstream product @id")
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, description="Large image URL (if provided)")
    price: Decimal
    currency: str
    details_url: str = Field(..., description="First tracking link's ppc URL")
    tracking_url: str = Field(..., description="details_url with the tracking parameter appended")
    raw: Dict[str, Any] = Field(default_factory=dict, description="Full raw upstream record")

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return Decimal(str(v)) if isinstance(v, float) else v


class Transaction(BaseModel):
    """A lead or sale taken from a daily report."""

    model_config = ConfigDict(frozen=True)

    program_id: str
    transaction_id: str
    status: TransactionStatus
    # Always None for Zanox
    status_detail: Optional[str] = None
    commission: Decimal
    currency: str
    tracked_at: datetime
    tracking_code: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("program_id", "transaction_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("commission", mode="before")
    @classmethod
    def coerce_commission(cls, v):
        return Decimal(str(v)) if isinstance(v, float) else v

    @field_validator("tracked_at")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class CommissionRate(BaseModel):
    """One tracking category (commission schedule entry) of a program."""

    model_config = ConfigDict(frozen=True)

    program_id: str
    rate_id: str
    name: str
    value_type: ValueType
    value: Decimal
    raw: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("rate_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v):
        return Decimal(str(v)) if isinstance(v, float) else v
