"""Admin review moderation routes."""
from flask import request, jsonify
from portal import db
from portal.models import Review
from portal.services import NotFound
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from portal.utils.clock import utcnow
from . import admin_bp, admin_required


@admin_bp.route('/reviews', methods=['GET'])
@token_required
@admin_required
def list_all_reviews():
    status_filter = request.args.get('status')

    query = Review.query
    if status_filter:
        query = query.filter_by(status=status_filter)
    reviews = query.order_by(Review.created_at.desc()).all()

    return jsonify([r.to_dict() for r in reviews]), 200


@admin_bp.route('/reviews/<int:review_id>', methods=['PUT'])
@token_required
@admin_required
def moderate_review(review_id):
    """Approve or reject a review. Body: {"status": "approved" | "rejected"}."""
    data = request.get_json() or {}
    status = data.get('status')
    if status not in ('approved', 'rejected'):
        return jsonify({'error': "Status must be 'approved' or 'rejected'"}), 400

    review = db.session.get(Review, review_id)
    if not review:
        raise NotFound('Review not found')

    review.status = status
    if status == 'approved':
        review.approved_at = utcnow()
    db.session.commit()

    audit_log('UPDATE', 'review', resource_id=review_id, details={'action': status})

    return jsonify(review.to_dict()), 200
