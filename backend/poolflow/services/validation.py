"""Pool form validation."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from poolflow.forms import PoolForm

MAX_DESCRIPTION_LENGTH = 500
MAX_EXTERNAL_URL_LENGTH = 200
MAX_IMAGE_HASH_LENGTH = 100

# Stellar assets carry 7 decimal places (1 stroop = 0.0000001)
AMOUNT_DECIMALS = 7

# Plain ASCII digits; no exponents, underscores or signs
_AMOUNT_RE = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_DAYS_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a pool form."""

    is_valid: bool
    field: str | None = None
    reason: str | None = None


VALID = ValidationResult(is_valid=True)


def _fail(field: str, reason: str) -> ValidationResult:
    return ValidationResult(is_valid=False, field=field, reason=reason)


def _parse_amount(value: str) -> Decimal | None:
    value = value.strip()
    if not _AMOUNT_RE.match(value):
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        return None


def _parse_days(value: str) -> int | None:
    value = value.strip()
    if not _DAYS_RE.match(value):
        return None
    try:
        return int(value)
    except ValueError:
        return None


def validate(form: PoolForm) -> ValidationResult:
    """
    Validate a pool form, reporting only the first rule that fails.

    Rules are checked in a fixed order: name, description, external URL,
    image hash, target amount, duration. Emptiness ignores surrounding
    whitespace; length limits apply to the raw value.

    Args:
        form: Form values to check

    Returns:
        VALID, or a failed ValidationResult naming the field and reason
    """
    if not form.name.strip():
        return _fail("name", "Pool name is required")

    if not form.description.strip():
        return _fail("description", "Description is required")
    if len(form.description) > MAX_DESCRIPTION_LENGTH:
        return _fail("description", "Description must be 500 characters or less")

    if not form.external_url.strip():
        return _fail("external_url", "External URL is required")
    if len(form.external_url) > MAX_EXTERNAL_URL_LENGTH:
        return _fail("external_url", "External URL must be 200 characters or less")

    if not form.image_hash.strip():
        return _fail("image_hash", "Image hash is required")
    if len(form.image_hash) > MAX_IMAGE_HASH_LENGTH:
        return _fail("image_hash", "Image hash must be 100 characters or less")

    amount = _parse_amount(form.target_amount) if form.target_amount else None
    if amount is None or amount <= 0:
        return _fail("target_amount", "Target amount must be greater than 0")
    if -int(amount.normalize().as_tuple().exponent) > AMOUNT_DECIMALS:
        return _fail("target_amount", "Target amount supports at most 7 decimal places")

    days = _parse_days(form.duration_days) if form.duration_days else None
    if days is None or days <= 0:
        return _fail("duration_days", "Duration must be greater than 0 days")

    return VALID
