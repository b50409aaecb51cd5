"""Backend validation for checkout form submissions.

The checkout page submits billing details as a dictionary (`form_data`).
These validators make sure the fields needed to deliver an order are present
and well-formed.

On validation failure, raise `CheckoutValidationError` so the API can return
HTTP 422 with structured `field_errors`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional


@dataclass
class CheckoutValidationError(Exception):
    """Exception raised for checkout form validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def optional_str(payload: Dict[str, Any], field: str) -> str:
    return _strip(payload.get(field))


def parse_bool(payload: Dict[str, Any], field: str) -> bool:
    v = payload.get(field)
    if isinstance(v, bool):
        return v
    return _strip(v).lower() in ("true", "1", "yes", "y", "on")


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(value: str, errors: Dict[str, str], field: str = "email") -> str:
    value = _strip(value)
    if not value:
        add_error(errors, field, "Email is required")
        return value
    if not _EMAIL_RE.match(value):
        add_error(errors, field, "Email is not valid")
    return value


def normalize_phone(value: str) -> str:
    """Strip spaces, dashes, brackets and a leading '+'."""
    s = _strip(value)
    s = re.sub(r"[\s\-\(\)]", "", s)
    if s.startswith("+"):
        s = s[1:]
    return s


def validate_phone(value: str, errors: Dict[str, str], field: str = "phone") -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Phone number is required")
        return raw
    norm = normalize_phone(raw)
    if not norm.isdigit():
        add_error(errors, field, "Phone number must contain digits only")
    elif not 9 <= len(norm) <= 15:
        add_error(errors, field, "Phone number format is not valid")
    return raw


def validate_in(value: str, allowed: Iterable[str], errors: Dict[str, str], field: str, *, required: bool = True, casefold: bool = False) -> str:
    raw = _strip(value)
    if not raw:
        if required:
            add_error(errors, field, f"{field} is required")
        return raw
    if casefold:
        ok = raw.casefold() in {a.casefold() for a in allowed}
    else:
        ok = raw in set(allowed)
    if not ok:
        add_error(errors, field, f"{field} has an invalid value")
    return raw


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise CheckoutValidationError(field_errors=errors, message=message)
