# =============================================================================
# tests/test_validation.py - Form Validation Tests
# =============================================================================

import pytest

from lib.validation import (
    ValidationCode,
    normalize_student_id,
    parse_semester,
    validate_email,
    validate_password,
    validate_password_confirmation,
    validate_semester,
    validate_signup_form,
    validate_student_id,
)


# =============================================================================
# Email
# =============================================================================

class TestValidateEmail:

    def test_institutional_email_is_valid(self):
        result = validate_email("x@eastdelta.edu.bd")
        assert result.is_valid
        assert result.error is None
        assert result.code is None

    def test_domain_match_is_case_insensitive(self):
        assert validate_email("Nadia.Rahman@EastDelta.EDU.BD").is_valid

    def test_other_domain_rejected(self):
        result = validate_email("a@b.edu.bd")
        assert not result.is_valid
        assert result.code == ValidationCode.DOMAIN_NOT_ALLOWED
        assert "@eastdelta.edu.bd" in result.error

    def test_subdomain_lookalike_rejected(self):
        # Must match the whole domain, not just end with it
        result = validate_email("a@noteastdelta.edu.bd")
        assert result.code == ValidationCode.DOMAIN_NOT_ALLOWED

    @pytest.mark.parametrize("email", ["plainaddress", "a@b", "a b@eastdelta.edu.bd", "@eastdelta.edu.bd"])
    def test_bad_shape_rejected(self, email):
        result = validate_email(email)
        assert not result.is_valid
        assert result.code == ValidationCode.INVALID_FORMAT

    def test_empty_is_required(self):
        assert validate_email("").code == ValidationCode.REQUIRED
        assert validate_email(None).code == ValidationCode.REQUIRED

    def test_custom_domain(self):
        assert validate_email("a@uni.example.edu", domain="uni.example.edu").is_valid
        assert validate_email("a@uni.example.edu", domain="@uni.example.edu").is_valid


# =============================================================================
# Password
# =============================================================================

class TestValidatePassword:

    def test_required(self):
        assert validate_password("").code == ValidationCode.REQUIRED

    def test_too_short(self):
        result = validate_password("12345")
        assert result.code == ValidationCode.TOO_SHORT
        assert "6" in result.error

    def test_six_characters_ok(self):
        assert validate_password("123456").is_valid

    def test_confirmation_required(self):
        assert validate_password_confirmation("secret1", "").code == ValidationCode.REQUIRED

    def test_confirmation_mismatch(self):
        result = validate_password_confirmation("secret1", "secret2")
        assert result.code == ValidationCode.MISMATCH
        assert result.error == "Passwords do not match"

    def test_confirmation_match(self):
        assert validate_password_confirmation("secret1", "secret1").is_valid


# =============================================================================
# Student ID
# =============================================================================

class TestValidateStudentId:

    def test_lowercase_is_normalized(self):
        assert validate_student_id("edu123456").is_valid

    def test_whitespace_is_ignored(self):
        assert validate_student_id(" edu 123 456 ").is_valid

    def test_too_short_rejected(self):
        result = validate_student_id("E1")
        assert not result.is_valid
        assert result.code == ValidationCode.INVALID_FORMAT

    @pytest.mark.parametrize("student_id", ["ABCDE1234", "AB123", "AB123456789", "1234EDU", "EDU١٢٣٤٥٦"])
    def test_pattern_bounds(self, student_id):
        assert not validate_student_id(student_id).is_valid

    @pytest.mark.parametrize("student_id", ["AB1234", "ABCD12345678", "CSE20230012"])
    def test_pattern_accepts(self, student_id):
        assert validate_student_id(student_id).is_valid

    def test_required(self):
        assert validate_student_id("").code == ValidationCode.REQUIRED

    def test_normalize(self):
        assert normalize_student_id("edu 123\t456") == "EDU123456"


# =============================================================================
# Semester
# =============================================================================

class TestValidateSemester:

    @pytest.mark.parametrize("value", ["0", "13", "-1", "abc"])
    def test_out_of_range(self, value):
        result = validate_semester(value)
        assert not result.is_valid
        assert result.code == ValidationCode.OUT_OF_RANGE

    @pytest.mark.parametrize("value", ["1", "7", "12", 7])
    def test_in_range(self, value):
        assert validate_semester(value).is_valid

    def test_required(self):
        assert validate_semester("").code == ValidationCode.REQUIRED

    def test_leading_integer_parse(self):
        assert parse_semester("7th") == 7
        assert parse_semester(" 3") == 3
        assert parse_semester("x3") is None


# =============================================================================
# Whole form
# =============================================================================

class TestValidateSignupForm:

    def test_valid_form(self):
        result = validate_signup_form(
            "nadia@eastdelta.edu.bd", "secret1", "secret1", "EDU123456", "7"
        )
        assert result.is_valid

    def test_first_failure_wins(self):
        # Both password confirmation and semester are wrong; confirmation comes first
        result = validate_signup_form(
            "nadia@eastdelta.edu.bd", "secret1", "secret2", "EDU123456", "13"
        )
        assert result.code == ValidationCode.MISMATCH
