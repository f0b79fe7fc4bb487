"""
Gift claim authorization and the atomic claim itself.
"""
import logging
from typing import NamedTuple, Optional
from sqlalchemy.exc import IntegrityError
from portal import db, storage
from portal.utils.clock import utcnow
from .errors import NotFound, ClaimDenied, ClaimConflict
from .quota import remaining_quota, used_this_month, quota_period

logger = logging.getLogger(__name__)

MAX_CLAIM_ATTEMPTS = 3


class ClaimDecision(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


ALLOWED = ClaimDecision(True)


def authorize_claim(member, gift, existing_deliveries, now=None) -> ClaimDecision:
    """
    Decide whether member may claim gift.

    Checks run in order and stop at the first failure: member approved,
    no earlier delivery of any gift, gift active, quota left this month.
    Nothing is written.
    """
    if member.status != 'approved':
        return ClaimDecision(False, 'not_approved')
    if existing_deliveries:
        return ClaimDecision(False, 'already_claimed')
    if not gift.active:
        return ClaimDecision(False, 'gift_inactive')
    if remaining_quota(gift, now) == 0:
        return ClaimDecision(False, 'quota_exhausted')
    return ALLOWED


def claim_gift(member_id, gift_id, delivery_fields: dict, now=None,
               max_attempts=MAX_CLAIM_ATTEMPTS):
    """
    Authorize and record a gift delivery for a member in one commit.

    Quota-limited gifts take the next numbered slot for the month. If a
    concurrent claim commits first, the unique constraints on the slot (or on
    member_id) reject this insert; the claim then retries against a fresh
    snapshot, where it is normally denied with a precise reason.
    """
    now = now or utcnow()

    for attempt in range(1, max_attempts + 1):
        member = storage.get_member(member_id)
        if member is None:
            raise NotFound('Member not found')
        gift = storage.get_gift(gift_id)
        if gift is None:
            raise NotFound('Gift not found')

        existing = storage.get_gift_deliveries_by_member(member_id)
        decision = authorize_claim(member, gift, existing, now)
        if not decision.allowed:
            logger.info('Gift claim denied: member=%s gift=%s reason=%s',
                        member_id, gift_id, decision.reason)
            raise ClaimDenied(decision.reason)

        period = slot = None
        if gift.monthly_quota is not None:
            slot = used_this_month(gift, now) + 1
            # usage may have moved since the authorizer looked
            if slot > gift.monthly_quota:
                raise ClaimDenied('quota_exhausted')
            period = quota_period(now)

        try:
            delivery = storage.create_gift_delivery(
                member_id=member_id,
                gift_id=gift_id,
                status='pending',
                quota_period=period,
                quota_slot=slot,
                created_at=now,
                updated_at=now,
                **delivery_fields
            )
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info('Gift claim conflict: member=%s gift=%s attempt=%d',
                        member_id, gift_id, attempt)
            continue

        logger.info('Gift claimed: member=%s gift=%s slot=%s/%s',
                    member_id, gift_id, slot, gift.monthly_quota)
        return delivery

    logger.warning('Gift claim gave up after %d attempts: member=%s gift=%s',
                   max_attempts, member_id, gift_id)
    raise ClaimConflict()
