"""
Admin verification of pending payments.
"""
import logging
from portal import db, storage
from portal.models import PAYMENT_DECISIONS
from portal.utils.clock import utcnow
from .errors import NotFound, AlreadyProcessed, ValidationFailed
from .membership import membership_window

logger = logging.getLogger(__name__)


def verify_payment(payment_id, decision, admin_id, now=None):
    """
    Mark a pending payment verified or rejected.

    Verification approves the owning member and resets the membership
    window to [now, now + 30 days]; rejection leaves the member untouched.
    The payment and member writes share one commit. A payment that is no
    longer pending raises AlreadyProcessed and nothing changes.
    """
    if decision not in PAYMENT_DECISIONS:
        raise ValidationFailed("Status must be 'verified' or 'rejected'")

    now = now or utcnow()

    payment = storage.get_payment(payment_id)
    if payment is None:
        raise NotFound('Payment not found')
    if not payment.is_pending:
        raise AlreadyProcessed(current_status=payment.status)

    updated = storage.update_payment_if_pending(payment_id, decision, admin_id, now)
    if updated is None:
        # Another admin decided it between our read and our write
        db.session.rollback()
        current = storage.get_payment(payment_id)
        raise AlreadyProcessed(current_status=current.status if current else None)

    if decision == 'verified':
        start, end = membership_window(now)
        storage.update_member(
            updated.member_id,
            status='approved',
            membership_start=start,
            membership_end=end,
        )

    db.session.commit()

    logger.info('Payment %s %s by admin %s (member %s)',
                payment_id, decision, admin_id, updated.member_id)
    return updated
