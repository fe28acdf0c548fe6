# =============================================================================
# lib/validation.py - Form Validation
# =============================================================================
# Pure validators for the sign-up and sign-in forms.
#
# Every function returns a ValidationResult and never raises, so screens can
# show `result.error` next to the offending field and re-prompt.
#
# Usage:
#   from lib.validation import validate_email
#   result = validate_email("x@eastdelta.edu.bd")
#   if not result.is_valid:
#       show(result.error)
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

DEFAULT_EMAIL_DOMAIN = "eastdelta.edu.bd"
MIN_PASSWORD_LENGTH = 6
MIN_SEMESTER = 1
MAX_SEMESTER = 12

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_STUDENT_ID_RE = re.compile(r"^[A-Z]{2,4}[0-9]{4,8}$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class ValidationCode(str, Enum):
    """Why a value was rejected."""
    REQUIRED = "required"
    INVALID_FORMAT = "invalid_format"
    DOMAIN_NOT_ALLOWED = "domain_not_allowed"
    TOO_SHORT = "too_short"
    MISMATCH = "mismatch"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a single validation.

    Attributes:
        is_valid: True when the value was accepted
        error: Human-readable message (only on failure)
        code: Machine-readable reason (only on failure)
    """
    is_valid: bool
    error: str | None = None
    code: ValidationCode | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def fail(cls, code: ValidationCode, error: str) -> ValidationResult:
        return cls(is_valid=False, error=error, code=code)


def validate_email(email: str | None, domain: str = DEFAULT_EMAIL_DOMAIN) -> ValidationResult:
    """
    Check an email has the local@domain.tld shape and the institutional domain.

    The domain comparison is case-insensitive and must match the whole
    domain: "a@b.edu.bd" is rejected for "eastdelta.edu.bd".
    """
    if not email:
        return ValidationResult.fail(ValidationCode.REQUIRED, "Email is required")

    if not _EMAIL_RE.match(email):
        return ValidationResult.fail(
            ValidationCode.INVALID_FORMAT, "Please enter a valid email address"
        )

    suffix = "@" + domain.lstrip("@").lower()
    if not email.lower().endswith(suffix):
        return ValidationResult.fail(
            ValidationCode.DOMAIN_NOT_ALLOWED,
            f"Please use your university email ({suffix})",
        )

    return ValidationResult.ok()


def validate_password(password: str | None) -> ValidationResult:
    if not password:
        return ValidationResult.fail(ValidationCode.REQUIRED, "Password is required")

    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.fail(
            ValidationCode.TOO_SHORT,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    return ValidationResult.ok()


def validate_password_confirmation(password: str | None, confirm_password: str | None) -> ValidationResult:
    if not confirm_password:
        return ValidationResult.fail(
            ValidationCode.REQUIRED, "Password confirmation is required"
        )

    if password != confirm_password:
        return ValidationResult.fail(ValidationCode.MISMATCH, "Passwords do not match")

    return ValidationResult.ok()


def normalize_student_id(student_id: str) -> str:
    """Strip all whitespace and upper-case. "edu 123 456" -> "EDU123456"."""
    return re.sub(r"\s", "", student_id).upper()


def validate_student_id(student_id: str | None) -> ValidationResult:
    """
    Accept 2-4 letters followed by 4-8 digits, after normalization.

    Example:
        validate_student_id("edu123456").is_valid  # True
        validate_student_id("E1").is_valid         # False
    """
    if not student_id:
        return ValidationResult.fail(ValidationCode.REQUIRED, "Student ID is required")

    if not _STUDENT_ID_RE.match(normalize_student_id(student_id)):
        return ValidationResult.fail(
            ValidationCode.INVALID_FORMAT,
            "Please enter a valid Student ID (e.g., EDU123456)",
        )

    return ValidationResult.ok()


def parse_semester(value: str | int | None) -> int | None:
    """
    Leading integer of a semester value, or None.

    Lenient like a form field: "7" -> 7, " 7th" -> 7, "abc" -> None.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def validate_semester(value: str | int | None) -> ValidationResult:
    if value is None or value == "":
        return ValidationResult.fail(ValidationCode.REQUIRED, "Semester is required")

    semester = parse_semester(value)
    if semester is None or not MIN_SEMESTER <= semester <= MAX_SEMESTER:
        return ValidationResult.fail(
            ValidationCode.OUT_OF_RANGE,
            f"Please select a semester between {MIN_SEMESTER} and {MAX_SEMESTER}",
        )

    return ValidationResult.ok()


def validate_signup_form(
    email: str | None,
    password: str | None,
    confirm_password: str | None,
    student_id: str | None,
    semester: str | int | None,
    domain: str = DEFAULT_EMAIL_DOMAIN,
) -> ValidationResult:
    """
    Run every sign-up check in form order and return the first failure.

    Returns a valid result when all fields pass.
    """
    checks = (
        lambda: validate_email(email, domain),
        lambda: validate_password(password),
        lambda: validate_password_confirmation(password, confirm_password),
        lambda: validate_student_id(student_id),
        lambda: validate_semester(semester),
    )
    for check in checks:
        result = check()
        if not result.is_valid:
            return result
    return ValidationResult.ok()
