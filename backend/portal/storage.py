"""
Persistence helpers for members, payments, gifts and gift deliveries.

These functions add and flush but never commit: the caller owns the
transaction, so a service can group several writes into one commit.
"""
from sqlalchemy import func
from portal import db
from portal.models import Member, Payment, Gift, GiftImage, GiftDelivery


# ============ Members ============

def get_member(member_id):
    return db.session.get(Member, member_id)


def get_member_by_phone(phone):
    return Member.query.filter_by(phone=phone).first()


def create_member(password, **data):
    member = Member(**data)
    member.set_password(password)
    db.session.add(member)
    db.session.flush()
    return member


def update_member(member_id, **partial):
    member = get_member(member_id)
    if member is None:
        return None
    for key, value in partial.items():
        setattr(member, key, value)
    db.session.flush()
    return member


def advance_member_status(member_id, from_status, to_status) -> bool:
    """Conditionally move a member between statuses. Returns True if a row changed."""
    changed = (
        Member.query
        .filter(Member.id == member_id, Member.status == from_status)
        .update({Member.status: to_status}, synchronize_session=False)
    )
    if changed:
        # Drop any stale copy of the row held by this session
        member = db.session.get(Member, member_id)
        if member is not None:
            db.session.refresh(member)
    return changed == 1


# ============ Gifts ============

def get_gift(gift_id):
    return db.session.get(Gift, gift_id)


def get_all_gifts():
    return Gift.query.order_by(Gift.id).all()


def create_gift(**data):
    gift = Gift(**data)
    db.session.add(gift)
    db.session.flush()
    return gift


def update_gift(gift_id, **partial):
    gift = get_gift(gift_id)
    if gift is None:
        return None
    for key, value in partial.items():
        setattr(gift, key, value)
    db.session.flush()
    return gift


def get_gift_images_grouped():
    """All gift images as {gift_id: [GiftImage, ...]}, each list in display order."""
    grouped = {}
    images = GiftImage.query.order_by(GiftImage.sort_order, GiftImage.created_at.desc()).all()
    for image in images:
        grouped.setdefault(image.gift_id, []).append(image)
    return grouped


def get_gift_image(image_id):
    return db.session.get(GiftImage, image_id)


def create_gift_image(**data):
    image = GiftImage(**data)
    db.session.add(image)
    db.session.flush()
    return image


def delete_gift_image(image):
    db.session.delete(image)
    db.session.flush()


# ============ Gift deliveries ============

def get_gift_deliveries_by_member(member_id):
    return (GiftDelivery.query
            .filter_by(member_id=member_id)
            .order_by(GiftDelivery.created_at.desc())
            .all())


def create_gift_delivery(**data):
    delivery = GiftDelivery(**data)
    db.session.add(delivery)
    db.session.flush()
    return delivery


def count_gift_deliveries_for_gift_in_month(gift_id, month_start, month_end) -> int:
    """Count deliveries of a gift created in [month_start, month_end)."""
    return (
        db.session.query(func.count(GiftDelivery.id))
        .filter(
            GiftDelivery.gift_id == gift_id,
            GiftDelivery.created_at >= month_start,
            GiftDelivery.created_at < month_end,
        )
        .scalar()
    ) or 0


# ============ Payments ============

def get_payment(payment_id):
    return db.session.get(Payment, payment_id)


def get_payments_by_member(member_id):
    return (Payment.query
            .filter_by(member_id=member_id)
            .order_by(Payment.created_at.desc())
            .all())


def create_payment(**data):
    payment = Payment(**data)
    db.session.add(payment)
    db.session.flush()
    return payment


def update_payment_if_pending(payment_id, decision, admin_id, now):
    """
    Set a payment's outcome only if it is still pending.

    The status check and the write are one UPDATE statement, so two
    concurrent decisions cannot both succeed. Returns the updated payment,
    or None if no pending payment with that id exists.
    """
    changed = (
        Payment.query
        .filter(Payment.id == payment_id, Payment.status == 'pending')
        .update({
            Payment.status: decision,
            Payment.verified_at: now,
            Payment.verified_by: admin_id,
        }, synchronize_session=False)
    )
    if changed != 1:
        return None
    payment = db.session.get(Payment, payment_id)
    db.session.refresh(payment)
    return payment
