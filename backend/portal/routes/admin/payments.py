"""Admin payment review routes."""
from flask import request, jsonify, g
from portal.models import Payment, PAYMENT_STATUS_CHOICES
from portal.services import verify_payment as verify_payment_service
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from . import admin_bp, admin_required


@admin_bp.route('/payments', methods=['GET'])
@token_required
@admin_required
def list_payments():
    """List payments, pending ones by default, with member info."""
    status_filter = request.args.get('status', 'pending')
    limit = min(request.args.get('limit', 50, type=int), 200)
    offset = request.args.get('offset', 0, type=int)

    query = Payment.query
    if status_filter != 'all':
        if status_filter not in PAYMENT_STATUS_CHOICES:
            return jsonify({'error': f'Invalid status. Must be one of: {PAYMENT_STATUS_CHOICES}'}), 400
        query = query.filter_by(status=status_filter)

    total_count = query.count()
    payments = query.order_by(Payment.created_at.desc()).offset(offset).limit(limit).all()

    result = []
    for payment in payments:
        data = payment.to_dict()
        data['member_name'] = payment.member.name if payment.member else None
        data['member_phone'] = payment.member.phone if payment.member else None
        data['member_status'] = payment.member.status if payment.member else None
        result.append(data)

    summary = {
        status: Payment.query.filter_by(status=status).count()
        for status in PAYMENT_STATUS_CHOICES
    }

    return jsonify({
        'payments': result,
        'total_count': total_count,
        'summary': summary,
    }), 200


@admin_bp.route('/payments/<int:payment_id>/verify', methods=['PUT'])
@token_required
@admin_required
def verify_payment(payment_id):
    """Verify or reject a pending payment. Body: {"status": "verified" | "rejected"}."""
    data = request.get_json() or {}
    decision = data.get('status')

    payment = verify_payment_service(payment_id, decision, g.admin_id)

    audit_log('UPDATE', 'payment', resource_id=payment_id, details={
        'action': decision,
        'member_id': payment.member_id,
    })

    return jsonify(payment.to_dict()), 200
