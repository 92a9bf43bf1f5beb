"""
modules/backup_restore/validators.py

Purpose
-------
Structural validation of backup files at the boundary, plus preflight
checks with clear, user-friendly error messages.

Public API
---------
- validate_backup_payload(data) -> BackupPayload
- validate_backup_destination(dest_file: str) -> None
- validate_backup_source(src_file: str) -> None
"""

from __future__ import annotations

import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from ...database.repositories.bills_repo import Bill, LineItem
from ...database.repositories.purchases_repo import Purchase, PurchasedItem
from ...utils.exceptions import ValidationError

_MAX_REPORTED_ERRORS = 5


def _to_id(v: Any) -> Any:
    # older exports used numeric (timestamp) ids
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(int(v))
    return v


def _to_iso_date(v: Any) -> Any:
    """Accept 'YYYY-MM-DD', full ISO datetimes, or millisecond timestamps."""
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        try:
            return datetime.fromtimestamp(v / 1000, tz=timezone.utc).date().isoformat()
        except (OverflowError, OSError) as exc:
            raise ValueError("date out of range") from exc
    if isinstance(v, str):
        return date.fromisoformat(v.strip()[:10]).isoformat()
    return v


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class LineItemModel(_Model):
    id: str
    code: str = ""
    name: str = Field(min_length=1)
    size: str = ""
    mrp: float = Field(ge=0)
    quantity: int
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    net_value: float
    origin_bill_id: Optional[str] = None

    @field_validator("id", "origin_bill_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _to_id(v)

    @field_validator("quantity")
    @classmethod
    def non_zero_quantity(cls, v: int) -> int:
        if v == 0:
            raise ValueError("quantity must not be zero")
        return v

    def to_item(self) -> LineItem:
        return LineItem(
            id=self.id,
            code=self.code or "",
            name=self.name,
            size=self.size,
            mrp=self.mrp,
            quantity=self.quantity,
            discount_percentage=self.discount_percentage,
            net_value=self.net_value,
            origin_bill_id=self.origin_bill_id,
        )


class BillModel(_Model):
    id: str
    customer_name: str = Field(min_length=1)
    customer_key: str = Field(
        min_length=1,
        validation_alias=AliasChoices("customerKey", "mobileNumber", "customer_key"),
        serialization_alias="customerKey",
    )
    items: List[LineItemModel]
    date: str
    transaction_type: Literal["Sale", "Exchange", "Return"]
    payment_method: Literal["Cash", "Card"]
    credit_applied: float = Field(default=0.0, ge=0)
    credit_generated: float = Field(default=0.0, ge=0)
    original_bill_id: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = None
    custom_invoice_number: Optional[str] = None

    @field_validator("id", "original_bill_id", "customer_key", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _to_id(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _to_iso_date(v)

    def to_bill(self) -> Bill:
        return Bill(
            id=self.id,
            customer_name=self.customer_name,
            customer_key=self.customer_key,
            items=[it.to_item() for it in self.items],
            date=self.date,
            transaction_type=self.transaction_type,
            payment_method=self.payment_method,
            credit_applied=self.credit_applied,
            credit_generated=self.credit_generated,
            original_bill_id=self.original_bill_id,
            address=self.address,
            gst_number=self.gst_number,
            custom_invoice_number=self.custom_invoice_number,
        )


class PurchasedItemModel(_Model):
    id: str
    name: str = Field(min_length=1)
    code: str
    size: str
    quantity: int = Field(gt=0)
    value: float = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _to_id(v)

    def to_item(self) -> PurchasedItem:
        return PurchasedItem(
            id=self.id, name=self.name, code=self.code, size=self.size,
            quantity=self.quantity, value=self.value,
        )


class PurchaseModel(_Model):
    id: str
    date: str
    supplier: Optional[str] = None
    items: List[PurchasedItemModel]

    @field_validator("id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _to_id(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _to_iso_date(v)

    def to_purchase(self) -> Purchase:
        return Purchase(
            id=self.id, date=self.date, supplier=self.supplier,
            items=[it.to_item() for it in self.items],
        )


class BackupPayload(_Model):
    bills: List[BillModel]
    credits: Dict[str, float]
    purchases: List[PurchaseModel]


def _describe(exc: SchemaError) -> str:
    errors = exc.errors()
    lines = []
    for err in errors[:_MAX_REPORTED_ERRORS]:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "(root)"
        lines.append(f"  - {loc}: {err.get('msg')}")
    if len(errors) > _MAX_REPORTED_ERRORS:
        lines.append(f"  … and {len(errors) - _MAX_REPORTED_ERRORS} more")
    return "The backup file is not valid:\n" + "\n".join(lines)


def validate_backup_payload(data: Any) -> BackupPayload:
    """
    Validate the decoded JSON of a backup file.

    Raises:
      ValidationError listing the first offending locations.
    """
    try:
        return BackupPayload.model_validate(data)
    except SchemaError as exc:
        raise ValidationError(_describe(exc)) from exc


def validate_backup_destination(dest_file: str) -> None:
    """
    Validate that the destination path can receive a backup file.

    Rules:
      - Parent folder must exist and be writable.
      - Filename must be non-empty and not a directory.
    Raises:
      ValidationError with a user-facing message on failure.
    """
    path = Path(dest_file)
    parent = path.parent if path.parent != Path("") else Path.cwd()

    if not parent.exists():
        raise ValidationError(f"Destination folder does not exist: {parent}")
    if not (parent.is_dir() and os.access(str(parent), os.W_OK | os.X_OK)):
        raise ValidationError(f"Destination folder is not writable: {parent}")
    if not path.name.strip():
        raise ValidationError("Please provide a file name for the backup.")
    if path.exists() and path.is_dir():
        raise ValidationError("Destination path points to a directory, not a file.")


def validate_backup_source(src_file: str) -> None:
    """
    Validate that the backup file exists and is readable before parsing it.
    """
    p = Path(src_file)
    if not p.exists():
        raise ValidationError(f"Backup file not found: {p}")
    if not p.is_file():
        raise ValidationError(f"Backup path is not a file: {p}")
    if not os.access(str(p), os.R_OK):
        raise ValidationError(f"Backup file is not readable: {p}")
