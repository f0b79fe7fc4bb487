"""
Member API routes: auth, profile, payments, gifts, events and reviews.
"""
import json
from datetime import datetime, timezone
from flask import Blueprint, request, jsonify, g
from portal import db, storage
from portal.models import Event, Review, Terms, SiteSettings
from portal.models.revoked_token import RevokedToken
from portal.services import (
    register_member, submit_payment, claim_gift, gift_catalog, NotFound,
)
from portal.utils.auth import generate_token, token_required, member_required, ROLE_MEMBER
from portal.utils.audit_logger import audit_log
from portal.utils.rate_limiter import rate_limit, login_limiter, registration_limiter
from portal.utils.validators import (
    validate_registration, validate_profile_update, validate_payment,
    validate_gift_delivery, extract_delivery_fields, validate_review,
)

member_bp = Blueprint('member', __name__)


# ============ Auth ============

@member_bp.route('/auth/register', methods=['POST'])
@rate_limit(registration_limiter)
def register():
    """Register a member and log them in."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_registration(data)
    if errors:
        return jsonify({'error': errors}), 400

    member = register_member(
        phone=str(data['phone']).strip(),
        password=str(data['password']),
        name=str(data['name']).strip(),
        prefix=str(data.get('prefix') or '').strip(),
    )
    token = generate_token(member.id, ROLE_MEMBER)

    audit_log('CREATE', 'member', resource_id=member.id,
              details={'action': 'registration'}, actor=f'member:{member.id}')

    return jsonify({'token': token, 'member': member.to_dict()}), 201


@member_bp.route('/auth/login', methods=['POST'])
@rate_limit(login_limiter)
def login():
    data = request.get_json() or {}
    phone = str(data.get('phone') or '').strip()
    password = data.get('password') or ''
    if not phone or not password:
        return jsonify({'error': 'Phone and password are required'}), 400

    member = storage.get_member_by_phone(phone)
    if not member or not member.check_password(password):
        audit_log('LOGIN_FAILED', 'member',
                  details={'reason': 'bad_credentials'}, actor='anonymous')
        return jsonify({'error': 'Invalid phone or password'}), 401

    token = generate_token(member.id, ROLE_MEMBER)
    audit_log('LOGIN', 'member', resource_id=member.id, actor=f'member:{member.id}')

    return jsonify({'token': token, 'member': member.to_dict()}), 200


@member_bp.route('/auth/logout', methods=['POST'])
@token_required
def logout():
    """Revoke the presented token (member or admin)."""
    expires_at = datetime.fromtimestamp(g.token_exp, tz=timezone.utc).replace(tzinfo=None)
    RevokedToken.revoke(g.token_jti, f'{g.token_role}:{g.subject_id}', expires_at)
    return jsonify({'message': 'Logged out successfully'}), 200


@member_bp.route('/auth/me', methods=['GET'])
@token_required
@member_required
def me():
    member = storage.get_member(g.member_id)
    return jsonify(member.to_dict()), 200


# ============ Profile ============

@member_bp.route('/member/profile', methods=['GET'])
@token_required
@member_required
def get_profile():
    member = storage.get_member(g.member_id)
    return jsonify(member.to_dict()), 200


@member_bp.route('/member/profile', methods=['PUT'])
@token_required
@member_required
def update_profile():
    data = request.get_json() or {}

    errors = validate_profile_update(data)
    if errors:
        return jsonify({'error': errors}), 400

    changes = {k: str(data[k]).strip() for k in ('name', 'phone', 'prefix') if k in data}

    if 'phone' in changes:
        other = storage.get_member_by_phone(changes['phone'])
        if other is not None and other.id != g.member_id:
            return jsonify({'error': 'Phone number already registered', 'kind': 'phone_taken'}), 409

    member = storage.update_member(g.member_id, **changes)
    db.session.commit()

    audit_log('UPDATE', 'member', resource_id=g.member_id,
              details={'action': 'profile_update', 'fields': sorted(changes)})

    return jsonify(member.to_dict()), 200


# ============ Payments ============

@member_bp.route('/payment/create', methods=['POST'])
@token_required
@member_required
def create_payment():
    """Submit a payment slip for first-time membership or renewal."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_payment(data)
    if errors:
        return jsonify({'error': errors}), 400

    payment = submit_payment(g.member_id, int(data['amount']), slip_url=data.get('slip_url'))

    audit_log('CREATE', 'payment', resource_id=payment.id,
              details={'amount': payment.amount})

    return jsonify(payment.to_dict()), 201


@member_bp.route('/payment/my-payments', methods=['GET'])
@token_required
@member_required
def my_payments():
    payments = storage.get_payments_by_member(g.member_id)
    return jsonify([p.to_dict() for p in payments]), 200


# ============ Gifts ============

@member_bp.route('/member/gifts', methods=['GET'])
@token_required
@member_required
def list_gifts():
    """Gift catalog with this month's usage, remaining quota and images."""
    return jsonify(gift_catalog()), 200


@member_bp.route('/member/gift-delivery', methods=['POST'])
@token_required
@member_required
def request_gift_delivery():
    """Claim a gift and give the delivery address."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_gift_delivery(data)
    if errors:
        return jsonify({'error': errors}), 400

    delivery = claim_gift(g.member_id, int(data['gift_id']), extract_delivery_fields(data))

    audit_log('CREATE', 'gift_delivery', resource_id=delivery.id,
              details={'gift_id': delivery.gift_id})

    return jsonify(delivery.to_dict()), 201


@member_bp.route('/member/gift-delivery', methods=['GET'])
@token_required
@member_required
def my_gift_deliveries():
    deliveries = storage.get_gift_deliveries_by_member(g.member_id)
    return jsonify([d.to_dict() for d in deliveries]), 200


# ============ Events ============

@member_bp.route('/member/events', methods=['GET'])
@token_required
@member_required
def list_events():
    events = Event.query.filter_by(active=True).order_by(Event.event_date).all()
    return jsonify([e.to_dict() for e in events]), 200


# ============ Reviews ============

@member_bp.route('/member/reviews', methods=['POST'])
@token_required
@member_required
def submit_review():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    member = storage.get_member(g.member_id)
    if not member.is_approved:
        return jsonify({'error': 'Only approved members can submit reviews',
                        'kind': 'not_approved'}), 403

    errors = validate_review(data)
    if errors:
        return jsonify({'error': errors}), 400

    review = Review(
        member_id=g.member_id,
        rating=int(data['rating']),
        title=str(data['title']).strip(),
        content=str(data['content']).strip(),
        pros=data.get('pros'),
        cons=data.get('cons'),
        images=json.dumps(data['images']) if data.get('images') else None,
        videos=json.dumps(data['videos']) if data.get('videos') else None,
    )
    db.session.add(review)
    db.session.commit()

    audit_log('CREATE', 'review', resource_id=review.id)

    return jsonify(review.to_dict()), 201


@member_bp.route('/member/reviews', methods=['GET'])
@token_required
@member_required
def list_reviews():
    reviews = (Review.query
               .filter_by(status='approved')
               .order_by(Review.created_at.desc())
               .all())
    return jsonify([r.to_dict() for r in reviews]), 200


@member_bp.route('/member/review/<int:review_id>/helpful', methods=['POST'])
@token_required
@member_required
def mark_review_helpful(review_id):
    data = request.get_json() or {}
    helpful = data.get('helpful')
    if not isinstance(helpful, bool):
        return jsonify({'error': 'helpful must be a boolean'}), 400

    column = Review.helpful if helpful else Review.not_helpful
    changed = (Review.query
               .filter(Review.id == review_id)
               .update({column: column + 1}, synchronize_session=False))
    if not changed:
        raise NotFound('Review not found')
    db.session.commit()

    return jsonify({'message': 'Review updated successfully'}), 200


# ============ Public content ============

@member_bp.route('/site-settings', methods=['GET'])
def public_site_settings():
    """Support contact link; readable without logging in."""
    settings = SiteSettings.get()
    return jsonify({'line_url': settings.line_url if settings else None}), 200


@member_bp.route('/terms', methods=['GET'])
def public_terms():
    terms = Terms.get()
    return jsonify(terms.to_dict() if terms else None), 200
