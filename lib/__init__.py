# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - validation.py: Sign-up / sign-in form validators
# - pricing.py: Coin price of a resource
# - supabase_client.py: Async Supabase wrapper
# - utils.py: Shared utilities (UUID normalization, object naming)
#
# validation.py and pricing.py are pure and can be tested in isolation.
# =============================================================================

from lib.pricing import calculate_coin_price
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid, storage_object_name
from lib.validation import (
    ValidationCode,
    ValidationResult,
    validate_email,
    validate_password,
    validate_password_confirmation,
    validate_semester,
    validate_signup_form,
    validate_student_id,
)

__all__ = [
    # Pricing
    "calculate_coin_price",
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "normalize_uuid",
    "storage_object_name",
    # Validation
    "ValidationCode",
    "ValidationResult",
    "validate_email",
    "validate_password",
    "validate_password_confirmation",
    "validate_semester",
    "validate_signup_form",
    "validate_student_id",
]
