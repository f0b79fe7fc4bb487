"""Admin dashboard and location stats routes."""
from datetime import timedelta
from flask import jsonify
from sqlalchemy import func
from portal import db
from portal.models import Member, Payment, GiftDelivery, Event, Review
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from portal.utils.clock import utcnow
from . import admin_bp, admin_required

EXPIRING_WINDOW = timedelta(days=7)


@admin_bp.route('/dashboard/stats', methods=['GET'])
@token_required
@admin_required
def get_dashboard_stats():
    """Aggregate dashboard statistics."""
    now = utcnow()

    total_users = Member.query.count()
    current = [
        m for m in Member.query.filter(Member.status == 'approved', Member.membership_end >= now)
        if m.has_active_membership(now)
    ]
    active_members = len(current)
    expiring_soon = sum(1 for m in current if m.membership_end <= now + EXPIRING_WINDOW)
    pending_approvals = Member.query.filter_by(status='pending_approval').count()

    # event_date holds ISO strings, which sort chronologically as text
    upcoming_events = Event.query.filter(
        Event.active.is_(True),
        Event.event_date >= now.strftime('%Y-%m-%dT%H:%M'),
    ).count()

    total_reviews = Review.query.count()
    average_rating = db.session.query(func.avg(Review.rating)).scalar()

    gifts_delivered = GiftDelivery.query.filter_by(status='sent').count()

    total_payments = Payment.query.count()
    verified_payments = Payment.query.filter_by(status='verified').count()
    pending_payments = Payment.query.filter_by(status='pending').count()

    audit_log('READ', 'admin_stats', details={'action': 'view_stats'})

    return jsonify({
        'total_users': total_users,
        'active_members': active_members,
        'pending_approvals': pending_approvals,
        'expiring_soon': expiring_soon,
        'upcoming_events': upcoming_events,
        'total_reviews': total_reviews,
        'average_rating': round(float(average_rating), 1) if average_rating is not None else 0,
        'gifts_delivered': gifts_delivered,
        'total_payments': total_payments,
        'verified_payments': verified_payments,
        'pending_payments': pending_payments,
    }), 200


def _count_by(column):
    rows = (db.session.query(column, func.count(GiftDelivery.id))
            .filter(column.isnot(None))
            .group_by(column)
            .all())
    rows.sort(key=lambda row: (-row[1], row[0]))
    return [{'name': name, 'count': count} for name, count in rows]


@admin_bp.route('/location-stats', methods=['GET'])
@token_required
@admin_required
def get_location_stats():
    """Gift deliveries grouped by province, district and subdistrict."""
    return jsonify({
        'provinces': _count_by(GiftDelivery.province),
        'districts': _count_by(GiftDelivery.district),
        'subdistricts': _count_by(GiftDelivery.subdistrict),
        'total': GiftDelivery.query.count(),
    }), 200
