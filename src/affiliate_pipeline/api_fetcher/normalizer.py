from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from .errors import MissingDataError, UnknownEnumValueError
from .schema import CommissionRate, Product, Program, Transaction, TransactionStatus, ValueType


NETWORK_KEY = "zanox"
TRACKING_CODE_PARAM = "zpar0"

TRANSACTION_STATUS_MAPPING: Dict[str, TransactionStatus] = {
    "approved": TransactionStatus.CONFIRMED,
    "confirmed": TransactionStatus.CONFIRMED,
    "open": TransactionStatus.PENDING,
    "rejected": TransactionStatus.DECLINED,
}

_MISSING = object()


def dig(payload: Any, path: str, default: Any = _MISSING) -> Any:
    """
    Walk a dotted path through nested dicts/lists ("trackingLinks.trackingLink.0.ppc").
    Returns `default` when any step is absent; raises MissingDataError when no
    default is given.
    """
    current = payload
    for key in path.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            current = _MISSING
            break

    if current is _MISSING or (current is None and default is _MISSING):
        if default is _MISSING:
            raise MissingDataError(f"Required field '{path}' is missing", payload)
        return default
    return current


def _nullable(payload: Dict[str, Any], key: str) -> Any:
    """The key must be present; an explicit null is kept as None."""
    if key not in payload:
        raise MissingDataError(f"Required field '{key}' is missing", payload)
    return payload[key]


def unwrap_list(value: Any, wrapper_key: str) -> List[Any]:
    """Zanox wraps lists as {"<wrapper_key>": [...]}; a single item may come unwrapped."""
    if isinstance(value, dict) and wrapper_key in value:
        value = value[wrapper_key]
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _to_decimal(value: Any, path: str, payload: Dict[str, Any]) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise MissingDataError(f"Field '{path}' is not numeric", payload) from e


def build_tracking_url(details_url: str, tracking_code: Optional[str]) -> str:
    """
    Append the attribution parameter to a product link:

        build_tracking_url("https://x/y?a=1", "abc") -> "https://x/y?a=1&zpar0=abc"
    """
    if tracking_code is None:
        return details_url
    separator = "&" if "?" in details_url else "?"
    return f"{details_url}{separator}{TRACKING_CODE_PARAM}={quote(str(tracking_code), safe='')}"


def extract_tracking_code(payload: Dict[str, Any]) -> Optional[str]:
    """Value of the zpar0 entry in `gpps`, or None when absent."""
    tracking_code = None
    for entry in unwrap_list(payload.get("gpps"), "gpp"):
        if isinstance(entry, dict) and entry.get("@id") == TRACKING_CODE_PARAM:
            tracking_code = entry.get("$")
    return tracking_code


def program_from_json(payload: Dict[str, Any]) -> Program:
    try:
        return Program(
            network=NETWORK_KEY,
            program_id=dig(payload, "@id"),
            name=dig(payload, "$"),
        )
    except ValidationError as e:
        raise MissingDataError(f"Invalid program: {e}", payload) from e


def product_from_json(payload: Dict[str, Any], tracking_code: Optional[str] = None) -> Product:
    details_url = dig(payload, "trackingLinks.trackingLink.0.ppc")
    try:
        return Product(
            program=program_from_json(dig(payload, "program")),
            product_id=dig(payload, "@id"),
            name=dig(payload, "name"),
            description=_nullable(payload, "description"),
            image_url=dig(payload, "image.large", None),
            price=_to_decimal(dig(payload, "price"), "price", payload),
            currency=dig(payload, "currency"),
            details_url=details_url,
            tracking_url=build_tracking_url(details_url, tracking_code),
            raw=payload,
        )
    except ValidationError as e:
        raise MissingDataError(f"Invalid product item: {e}", payload) from e


def map_transaction_status(review_state: Any) -> TransactionStatus:
    try:
        return TRANSACTION_STATUS_MAPPING[review_state]
    except (KeyError, TypeError):
        raise UnknownEnumValueError("reviewState", review_state) from None


def transaction_from_json(payload: Dict[str, Any]) -> Transaction:
    try:
        return Transaction(
            program_id=dig(payload, "program.@id"),
            transaction_id=dig(payload, "@id"),
            status=map_transaction_status(dig(payload, "reviewState")),
            status_detail=None,
            commission=_to_decimal(dig(payload, "commission"), "commission", payload),
            currency=dig(payload, "currency"),
            tracked_at=dig(payload, "trackingDate"),
            tracking_code=extract_tracking_code(payload),
            raw=payload,
        )
    except ValidationError as e:
        raise MissingDataError(f"Invalid transaction item: {e}", payload) from e


def commission_rate_from_json(program_id: str, payload: Dict[str, Any]) -> CommissionRate:
    """
    saleFixed wins whenever it is positive; otherwise the rate is a
    percentage taken from salePercent.
    """
    sale_fixed = payload.get("saleFixed")
    if sale_fixed is not None and _to_decimal(sale_fixed, "saleFixed", payload) > 0:
        value_type = ValueType.FIXED
        value = _to_decimal(sale_fixed, "saleFixed", payload)
    else:
        value_type = ValueType.PERCENTAGE
        value = _to_decimal(dig(payload, "salePercent"), "salePercent", payload)

    try:
        return CommissionRate(
            program_id=str(program_id),
            rate_id=dig(payload, "@id"),
            name=dig(payload, "name"),
            value_type=value_type,
            value=value,
            raw=payload,
        )
    except ValidationError as e:
        raise MissingDataError(f"Invalid commission rate: {e}", payload) from e
