# =============================================================================
# tests/unit/test_validators.py
# Unit Tests for input validation helpers
# =============================================================================

import pytest
from datetime import date, datetime, timezone


class TestPhoneAndEmail:
    """Test contact field validation"""

    @pytest.mark.parametrize("phone", ["+1 (555) 123-4567", "020 7946 0958", "+447911123456"])
    def test_valid_phones(self, phone):
        from asthmacare.utils.validators import is_valid_phone_number

        assert is_valid_phone_number(phone)

    @pytest.mark.parametrize("phone", ["", None, "12345", "call me maybe", "555-CALL-NOW"])
    def test_invalid_phones(self, phone):
        from asthmacare.utils.validators import is_valid_phone_number

        assert not is_valid_phone_number(phone)

    @pytest.mark.parametrize("email,valid", [
        ("patient@example.com", True),
        ("a.b+c@sub.example.org", True),
        ("no-at-sign.com", False),
        ("spaces in@example.com", False),
        ("user@localhost", False),
        (None, False),
    ])
    def test_email(self, email, valid):
        from asthmacare.utils.validators import is_valid_email

        assert is_valid_email(email) is valid


class TestFileValidation:
    """Test upload checks"""

    def test_valid_pdf(self):
        from asthmacare.utils.validators import validate_file

        assert validate_file(1024, "application/pdf") == {"valid": True, "errors": []}

    def test_too_large_and_wrong_type(self):
        from asthmacare.utils.validators import validate_file

        result = validate_file(20 * 1024 * 1024, "application/zip")

        assert not result["valid"]
        assert result["errors"] == [
            "File size must be less than 10MB",
            "File type application/zip is not allowed",
        ]

    def test_size_limit_is_inclusive(self):
        from asthmacare.utils.validators import MAX_UPLOAD_BYTES, validate_file

        assert validate_file(MAX_UPLOAD_BYTES, "image/png")["valid"]

    def test_unique_filename(self):
        from asthmacare.utils.validators import generate_unique_filename

        first = generate_unique_filename("Peak Flow.JPEG", "u1")
        second = generate_unique_filename("Peak Flow.JPEG", "u1")

        assert first.startswith("u1_")
        assert first.endswith(".JPEG")
        assert first != second

    def test_unique_filename_without_extension(self):
        from asthmacare.utils.validators import generate_unique_filename

        assert generate_unique_filename("README", "u1").endswith(".bin")

    @pytest.mark.parametrize("size,expected", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1536, "1.5 KB"),
        (10 * 1024 * 1024, "10 MB"),
    ])
    def test_format_file_size(self, size, expected):
        from asthmacare.utils.validators import format_file_size

        assert format_file_size(size) == expected


class TestTimestamps:
    """Test timestamp parsing"""

    def test_z_suffix(self):
        from asthmacare.utils.timeutils import parse_timestamp

        assert parse_timestamp("2024-03-15T12:00:00Z") == datetime(2024, 3, 15, 12, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        from asthmacare.utils.timeutils import parse_timestamp

        assert parse_timestamp(datetime(2024, 3, 15, 12)).tzinfo is not None

    def test_offset_is_converted(self):
        from asthmacare.utils.timeutils import parse_timestamp

        parsed = parse_timestamp("2024-03-15T14:00:00+02:00")

        assert parsed == datetime(2024, 3, 15, 12, tzinfo=timezone.utc)

    def test_date(self):
        from asthmacare.utils.timeutils import parse_timestamp

        assert parse_timestamp(date(2024, 3, 15)).hour == 0

    def test_unsupported(self):
        from asthmacare.utils.timeutils import parse_timestamp

        with pytest.raises(TypeError):
            parse_timestamp(1710504000)
