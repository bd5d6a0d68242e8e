"""
Tests for toolkit helper functions.
"""

import pytest

from toolkit.helpers import mask_email


class TestMaskEmail:
    @pytest.mark.parametrize(
        "email,expected",
        [
            ("john.doe@example.com", "j***@example.com"),
            ("j@example.com", "***@example.com"),
            ("odd@name@example.com", "o***@example.com"),
            ("not-an-email", "***"),
            ("", "***"),
        ],
    )
    def test_masking(self, email, expected):
        assert mask_email(email) == expected
