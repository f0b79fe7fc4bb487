"""
Member lifecycle: registration, payment submission, verification outcome
and admin edits.

Automatic transitions:
    registration          -> pending_payment
    payment submitted     pending_payment -> pending_approval
                          (approved members stay approved on renewal)
    payment verified      -> approved, window reset to now .. now + 30 days
    payment rejected      no change
Admins may set any status directly.
"""
import logging
import secrets
from datetime import timedelta
from sqlalchemy.exc import IntegrityError
from portal import db, storage
from portal.models import MEMBER_STATUS_CHOICES
from portal.utils.clock import utcnow
from .errors import NotFound, PhoneTaken, ValidationFailed

logger = logging.getLogger(__name__)

MEMBERSHIP_PERIOD = timedelta(days=30)

ADMIN_EDITABLE_FIELDS = (
    'phone', 'prefix', 'name', 'status',
    'membership_start', 'membership_end', 'created_at',
)


def membership_window(now):
    """Start and end of a membership verified at now. Renewals do not stack."""
    return now, now + MEMBERSHIP_PERIOD


def register_member(phone, password, name, prefix=''):
    """Create a member in pending_payment. Raises PhoneTaken on duplicates."""
    if storage.get_member_by_phone(phone):
        raise PhoneTaken()
    try:
        member = storage.create_member(
            password=password,
            phone=phone,
            name=name,
            prefix=prefix,
            status='pending_payment',
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise PhoneTaken()

    logger.info('Member registered: id=%s', member.id)
    return member


def submit_payment(member_id, amount, slip_url=None, now=None):
    """
    Record a payment slip. A member waiting for a first payment moves to
    pending_approval; every other status, approved included, is left as is.
    """
    member = storage.get_member(member_id)
    if member is None:
        raise NotFound('Member not found')

    payment = storage.create_payment(
        member_id=member_id,
        amount=amount,
        slip_url=slip_url,
        status='pending',
        created_at=now or utcnow(),
    )
    advanced = storage.advance_member_status(member_id, 'pending_payment', 'pending_approval')
    db.session.commit()

    if advanced:
        logger.info('Member %s: pending_payment -> pending_approval (payment %s)',
                    member_id, payment.id)
    else:
        logger.info('Member %s submitted payment %s; status stays %s',
                    member_id, payment.id, member.status)
    return payment


def apply_admin_edit(member_id, changes: dict):
    """
    Apply an admin's direct edit. Any status may be set; the membership
    window must stay both-or-neither and ordered.
    """
    member = storage.get_member(member_id)
    if member is None:
        raise NotFound('Member not found')

    changes = {k: v for k, v in changes.items() if k in ADMIN_EDITABLE_FIELDS}

    status = changes.get('status', member.status)
    if status not in MEMBER_STATUS_CHOICES:
        raise ValidationFailed(f'Invalid status. Must be one of: {MEMBER_STATUS_CHOICES}')

    start = changes.get('membership_start', member.membership_start)
    end = changes.get('membership_end', member.membership_end)
    if (start is None) != (end is None):
        raise ValidationFailed('membership_start and membership_end must be set together')
    if start is not None and start > end:
        raise ValidationFailed('membership_start must not be after membership_end')

    phone = changes.get('phone')
    if phone and phone != member.phone:
        other = storage.get_member_by_phone(phone)
        if other is not None:
            raise PhoneTaken()

    old_status = member.status
    try:
        storage.update_member(member_id, **changes)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise PhoneTaken()

    if old_status != member.status:
        logger.info('Member %s: %s -> %s (admin edit)', member_id, old_status, member.status)
    return member


def reset_member_password(member_id):
    """Replace a member's password with a random one and return it."""
    member = storage.get_member(member_id)
    if member is None:
        raise NotFound('Member not found')

    new_password = secrets.token_urlsafe(12)
    member.set_password(new_password)
    db.session.commit()
    return member, new_password
