"""
Tests for status and document type display styles.
"""

import pytest

from lib.entities import DeliverableStatus, DocumentType
from lib.styles import Style, accent, get_document_type_style, get_status_style


class TestStyles:
    def test_accent(self):
        style = accent("lime", "Terminé", with_border=True)
        assert style == Style(
            bg="bg-[var(--accent-lime)]/10",
            text="text-[var(--accent-lime)]",
            label="Terminé",
            border="border-[var(--accent-lime)]/30",
        )

    def test_to_dict_drops_missing_border(self):
        assert "border" not in accent("cyan", "Brief").to_dict()

    @pytest.mark.parametrize(
        "status,label",
        [
            ("to_quote", "À deviser"),
            ("pending", "À faire"),
            ("in-progress", "En attente"),
            ("completed", "Terminé"),
        ],
    )
    def test_status_labels(self, status, label):
        style = get_status_style(status)
        assert style.label == label
        assert style.border is not None

    def test_every_status_styled(self):
        for status in DeliverableStatus:
            assert get_status_style(status).label

    def test_every_document_type_styled(self):
        for doc_type in DocumentType:
            assert get_document_type_style(doc_type).label

    def test_document_labels(self):
        assert get_document_type_style("report").label == "Report PLAUD"
        assert get_document_type_style("social-brief").label == "Brief Social"

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            get_status_style("archived")
