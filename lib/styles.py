"""
Display styles for deliverable statuses and document types.

Class strings are Tailwind utilities referencing the dashboard's CSS
accent variables; labels are the French names shown in the UI.
"""

from dataclasses import asdict, dataclass

from lib.entities import DeliverableStatus, DocumentType


@dataclass(frozen=True)
class Style:
    bg: str
    text: str
    label: str
    border: str | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def accent(color: str, label: str, with_border: bool = False) -> Style:
    return Style(
        bg=f"bg-[var(--accent-{color})]/10",
        text=f"text-[var(--accent-{color})]",
        label=label,
        border=f"border-[var(--accent-{color})]/30" if with_border else None,
    )


STATUS_STYLES: dict[str, Style] = {
    DeliverableStatus.TO_QUOTE.value: accent("coral", "À deviser", with_border=True),
    DeliverableStatus.PENDING.value: accent("cyan", "À faire", with_border=True),
    DeliverableStatus.IN_PROGRESS.value: accent("violet", "En attente", with_border=True),
    DeliverableStatus.COMPLETED.value: accent("lime", "Terminé", with_border=True),
}

DOCUMENT_TYPE_STYLES: dict[str, Style] = {
    DocumentType.BRIEF.value: accent("cyan", "Brief"),
    DocumentType.REPORT.value: accent("violet", "Report PLAUD"),
    DocumentType.NOTE.value: accent("violet", "Note"),
    DocumentType.CREATIVE_STRATEGY.value: accent("lime", "Stratégie créative"),
    DocumentType.WEB_BRIEF.value: accent("cyan", "Structure site"),
    DocumentType.SOCIAL_BRIEF.value: accent("magenta", "Brief Social"),
}


def get_status_style(status: str | DeliverableStatus) -> Style:
    return STATUS_STYLES[DeliverableStatus(status).value]


def get_document_type_style(doc_type: str | DocumentType) -> Style:
    return DOCUMENT_TYPE_STYLES[DocumentType(doc_type).value]
