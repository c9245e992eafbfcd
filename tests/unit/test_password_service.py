"""Unit tests for PasswordService."""

from unittest.mock import patch

import pytest

from devcamper.exceptions import ValidationError
from devcamper.services.password_service import PasswordService


class TestPasswordHashing:
    """Tests for bcrypt hash / verify."""

    def test_hash_returns_bcrypt_string(self, password_service):
        hashed = password_service.hash("my-secret-pw")
        assert hashed.startswith("$2b$") or hashed.startswith("$2a$")
        assert len(hashed) == 60

    def test_hash_uses_configured_rounds(self):
        hashed = PasswordService(rounds=5).hash("pw")
        assert hashed.split("$")[2] == "05"

    def test_hash_different_salts(self, password_service):
        h1 = password_service.hash("same-password")
        h2 = password_service.hash("same-password")
        assert h1 != h2, "Each call should produce a unique salt"

    def test_verify_correct(self, password_service):
        hashed = password_service.hash("correct-horse-battery")
        assert password_service.verify("correct-horse-battery", hashed) is True

    def test_verify_wrong(self, password_service):
        hashed = password_service.hash("right-password")
        assert password_service.verify("wrong-password", hashed) is False

    def test_verify_malformed_hash_is_false(self, password_service):
        assert password_service.verify("anything", "not-a-bcrypt-hash") is False


class TestPasswordLength:
    """bcrypt reads at most 72 bytes; longer input is refused, not truncated."""

    def test_hash_rejects_over_72_bytes(self, password_service):
        with pytest.raises(ValidationError, match="at most 72 bytes"):
            password_service.hash("a" * 80)

    def test_hash_counts_bytes_not_characters(self, password_service):
        # 36 two-byte characters are exactly 72 bytes
        assert password_service.hash("é" * 36).startswith("$2")
        with pytest.raises(ValidationError):
            password_service.hash("é" * 37)

    def test_verify_over_72_bytes_is_false_without_warning(self, password_service):
        hashed = password_service.hash("a" * 72)
        with patch("devcamper.services.password_service.logger") as mock_logger:
            assert password_service.verify("a" * 80, hashed) is False
        mock_logger.warning.assert_not_called()

    def test_verify_malformed_hash_still_warns(self, password_service):
        with patch("devcamper.services.password_service.logger") as mock_logger:
            assert password_service.verify("anything", "not-a-bcrypt-hash") is False
        mock_logger.warning.assert_called_once_with("password_hash_malformed")
