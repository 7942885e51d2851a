"""
Production <-> billing status rules for deliverables.

Flow: to_quote -> pending -> in-progress -> completed

- to_quote -> pending needs a product price or a quoted project
- pending -> in-progress is free
- completed is only entered or left through the edit modal, never by drag
- back to to_quote is refused once the product has a price

Every status change in the kanban goes through can_transition_status();
edits made in the modal go through compute_status_cascade().
"""

from dataclasses import dataclass

from lib.entities import BillingStatus, DeliverableStatus

REASON_EDIT_COMPLETED = "Ouvre la modale pour modifier un produit terminé"
REASON_MARK_COMPLETED = "Ouvre la modale pour marquer un produit terminé"
REASON_ALREADY_QUOTED = 'Produit déjà devisé — impossible de revenir à "À deviser"'
REASON_NEEDS_PRICE = "Ajoute un prix ou rattache à un projet devisé"


@dataclass
class DeliverableContext:
    status: str
    billing_status: str = BillingStatus.PENDING.value
    prix_facture: float | None = None
    # Quote of the parent project, when attached to a quoted one
    project_quote_amount: float | None = None


@dataclass
class TransitionResult:
    allowed: bool
    reason: str | None = None

    def to_dict(self) -> dict:
        data = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


def _has_price(price: float | None) -> bool:
    return price is not None and price > 0


def can_transition_status(
    ctx: DeliverableContext, new_status: str | DeliverableStatus
) -> TransitionResult:
    """Whether a kanban drag from ``ctx.status`` to *new_status* is allowed."""
    current = DeliverableStatus(ctx.status)
    target = DeliverableStatus(new_status)

    if current == target:
        return TransitionResult(allowed=True)

    if current == DeliverableStatus.COMPLETED:
        return TransitionResult(allowed=False, reason=REASON_EDIT_COMPLETED)
    if target == DeliverableStatus.COMPLETED:
        return TransitionResult(allowed=False, reason=REASON_MARK_COMPLETED)

    if target == DeliverableStatus.TO_QUOTE:
        if _has_price(ctx.prix_facture):
            return TransitionResult(allowed=False, reason=REASON_ALREADY_QUOTED)
        return TransitionResult(allowed=True)

    if target == DeliverableStatus.PENDING and current == DeliverableStatus.TO_QUOTE:
        project_quoted = (ctx.project_quote_amount or 0) > 0
        if not _has_price(ctx.prix_facture) and not project_quoted:
            return TransitionResult(allowed=False, reason=REASON_NEEDS_PRICE)

    return TransitionResult(allowed=True)


def compute_status_cascade(
    current_status: str | DeliverableStatus,
    new_billing_status: str | BillingStatus,
    new_prix_facture: float | None,
) -> dict:
    """
    Status change implied by an edit in the modal.

    Returns ``{"status": ...}`` or ``{}`` when nothing changes. Rules are
    applied in order and a later rule overrides an earlier one, so adding a
    price and settling the balance at once ends on "completed".
    """
    current = DeliverableStatus(current_status)
    billing = BillingStatus(new_billing_status)
    changes: dict = {}

    if current == DeliverableStatus.TO_QUOTE and _has_price(new_prix_facture):
        changes["status"] = DeliverableStatus.PENDING.value

    if current == DeliverableStatus.PENDING and not _has_price(new_prix_facture):
        changes["status"] = DeliverableStatus.TO_QUOTE.value

    if billing == BillingStatus.BALANCE and current != DeliverableStatus.COMPLETED:
        changes["status"] = DeliverableStatus.COMPLETED.value

    if billing != BillingStatus.BALANCE and current == DeliverableStatus.COMPLETED:
        changes["status"] = DeliverableStatus.IN_PROGRESS.value

    return changes
