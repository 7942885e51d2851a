"""
Tests for application errors and message extraction.
"""

import pytest

from lib.errors import (
    AppError,
    ConfigurationError,
    InputError,
    NotFoundError,
    RetroplanningGenerationError,
    get_error_message,
)

# =============================================================================
# Error types
# =============================================================================


class TestAppErrors:
    def test_not_found(self):
        error = NotFoundError("deliverable", "deliv-x")
        assert error.status_code == 404
        assert error.to_dict() == {
            "error": "Élément introuvable",
            "code": "DELIVERABLE_NOT_FOUND",
            "detail": "deliverable not found: deliv-x",
        }

    @pytest.mark.parametrize(
        "error, status, code",
        [
            (InputError("deadline est requis"), 400, "INVALID_INPUT"),
            (ConfigurationError("clé manquante"), 500, "MISSING_CONFIGURATION"),
            (RetroplanningGenerationError("JSON invalide"), 502, "RETROPLANNING_GENERATION_FAILED"),
        ],
    )
    def test_status_and_code(self, error, status, code):
        assert error.status_code == status
        assert error.code == code
        assert error.user_message == error.message

    def test_default_user_message(self):
        assert AppError("boom", "INTERNAL").user_message == "Une erreur est survenue."


# =============================================================================
# get_error_message
# =============================================================================


class TestGetErrorMessage:
    def test_app_error_uses_technical_message(self):
        assert get_error_message(NotFoundError("client", "c-1")) == "client not found: c-1"

    def test_plain_exception(self):
        assert get_error_message(ValueError("invalid literal")) == "invalid literal"

    def test_mapping_message_then_details(self):
        assert get_error_message({"message": "quota", "details": "x"}) == "quota"
        assert get_error_message({"details": "row locked"}) == "row locked"

    def test_mapping_without_text(self):
        assert get_error_message({"message": 42}) == "{'message': 42}"

    def test_anything_else(self):
        assert get_error_message(None) == "None"
