"""Labels and colours for project billing statuses."""

from lib.billing.project_billing import ProjectBillingStatus
from lib.entities import BillingStatus
from lib.styles import Style

PROJECT_BILLING_LABELS: dict[str, str] = {
    ProjectBillingStatus.NONE.value: "Pas de devis",
    ProjectBillingStatus.QUOTED.value: "Devisé",
    ProjectBillingStatus.DEPOSIT.value: "Acompte",
    ProjectBillingStatus.PROGRESS.value: "En cours",
    ProjectBillingStatus.BALANCED.value: "Soldé",
}

PROJECT_BILLING_COLORS: dict[str, dict[str, str]] = {
    ProjectBillingStatus.NONE.value: {
        "bg": "bg-[var(--bg-secondary)]",
        "text": "text-[var(--text-muted)]",
    },
    ProjectBillingStatus.QUOTED.value: {
        "bg": "bg-[var(--accent-cyan)]/10",
        "text": "text-[var(--accent-cyan)]",
    },
    ProjectBillingStatus.DEPOSIT.value: {
        "bg": "bg-[var(--accent-amber)]/10",
        "text": "text-[var(--accent-amber)]",
    },
    ProjectBillingStatus.PROGRESS.value: {
        "bg": "bg-[var(--accent-violet)]/10",
        "text": "text-[var(--accent-violet)]",
    },
    ProjectBillingStatus.BALANCED.value: {
        "bg": "bg-[var(--accent-lime)]/10",
        "text": "text-[var(--accent-lime)]",
    },
}

# Per-deliverable billing steps (history timeline)
BILLING_STATUS_LABELS: dict[str, str] = {
    BillingStatus.PENDING.value: "En attente",
    BillingStatus.DEPOSIT.value: "Acompte",
    BillingStatus.PROGRESS.value: "Avancement",
    BillingStatus.BALANCE.value: "Soldé",
}


def project_billing_style(status: str | ProjectBillingStatus) -> Style:
    key = ProjectBillingStatus(status).value
    colors = PROJECT_BILLING_COLORS[key]
    return Style(bg=colors["bg"], text=colors["text"], label=PROJECT_BILLING_LABELS[key])


__all__ = [
    "BILLING_STATUS_LABELS",
    "PROJECT_BILLING_COLORS",
    "PROJECT_BILLING_LABELS",
    "project_billing_style",
]
