from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Maximum money amount: R$ 9.999.999,99
MAX_MONEY_CENTS = 999_999_999
MAX_QUANTITY = 1_000_000


class ValidationError(ValueError):
    """400-level input problem. Raised before anything is written."""


class UnknownProductError(ValueError):
    """404-level: a write names a product that is not in the catalog."""

    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate product name)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = frozenset()


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    return {c.key: c for c in model.__mapper__.columns}


def coerce_int(field: str, value: Any) -> int:
    """
    Strict integer parsing: ints and plain digit strings only.

    Floats, decimals ("12.5") and scientific notation ("1e3") are rejected
    so that a typo never silently truncates a quantity.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped or "," in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def require_positive_int(field: str, value: Any) -> int:
    n = coerce_int(field, value)
    if n <= 0:
        raise ValidationError(f"{field} must be > 0")
    if n > MAX_QUANTITY:
        raise ValidationError(f"{field} cannot exceed {MAX_QUANTITY}")
    return n


def require_non_negative_int(field: str, value: Any) -> int:
    n = coerce_int(field, value)
    if n < 0:
        raise ValidationError(f"{field} must be >= 0")
    if n > MAX_QUANTITY:
        raise ValidationError(f"{field} cannot exceed {MAX_QUANTITY}")
    return n


def check_money_cents(field: str, cents: int, *, allow_zero: bool) -> int:
    if cents < 0 or (cents == 0 and not allow_zero):
        raise ValidationError(f"{field} must be {'>= 0' if allow_zero else '> 0'}")
    if cents > MAX_MONEY_CENTS:
        raise ValidationError(f"{field} cannot exceed {MAX_MONEY_CENTS}")
    return cents


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
) -> dict:
    """
    Validates + normalizes incoming JSON for create operations against the
    SQLAlchemy column metadata and the policy allowlist. Returns a cleaned
    dict with only writable fields.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    missing = sorted(f for f in policy.required_on_create if f not in payload)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)
    patch: dict = {}

    for key, raw in payload.items():
        if key not in policy.writable_fields or key not in cols:
            raise ValidationError(f"Field not allowed: {key}")
        col = cols[key]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[key] = None
            continue

        if isinstance(col.type, Integer):
            val = coerce_int(key, raw)
        elif isinstance(col.type, (String, Text)):
            val = str(raw).strip()
            if not col.nullable and val == "":
                raise ValidationError(f"{key} cannot be blank")
            if isinstance(col.type, String) and col.type.length and len(val) > col.type.length:
                raise ValidationError(f"{key} exceeds max length {col.type.length}")
        else:
            val = raw

        patch[key] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    for field in ("unit_cost_cents", "suggested_price_cents"):
        if field in patch:
            check_money_cents(field, patch[field], allow_zero=True)
    if "units_per_pack" in patch and patch["units_per_pack"] is not None:
        if patch["units_per_pack"] <= 0:
            raise ValidationError("units_per_pack must be > 0")
    if "initial_quantity" in patch:
        require_non_negative_int("initial_quantity", patch["initial_quantity"])


def enforce_rules_promotion(patch: dict) -> None:
    if patch.get("trigger_quantity") is None or patch["trigger_quantity"] <= 0:
        raise ValidationError("trigger_quantity must be > 0")
    check_money_cents("bundle_price_cents", patch["bundle_price_cents"], allow_zero=True)
