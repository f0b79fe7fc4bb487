"""Admin member management routes."""
from flask import request, jsonify
from sqlalchemy import or_
from portal import storage
from portal.models import Member
from portal.services import apply_admin_edit, reset_member_password, NotFound
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from portal.utils.validators import validate_member_edit
from . import admin_bp, admin_required


@admin_bp.route('/members', methods=['GET'])
@token_required
@admin_required
def list_members():
    """List members with optional status filter, search and pagination."""
    status_filter = request.args.get('status')
    search = request.args.get('search', '').strip()
    limit = min(request.args.get('limit', 50, type=int), 200)
    offset = request.args.get('offset', 0, type=int)

    query = Member.query
    if status_filter:
        query = query.filter_by(status=status_filter)
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(Member.name.ilike(pattern), Member.phone.like(pattern)))

    total_count = query.count()
    members = query.order_by(Member.created_at.desc()).offset(offset).limit(limit).all()

    return jsonify({
        'members': [m.to_dict() for m in members],
        'total_count': total_count,
    }), 200


@admin_bp.route('/members/<int:member_id>', methods=['GET'])
@token_required
@admin_required
def get_member(member_id):
    member = storage.get_member(member_id)
    if not member:
        raise NotFound('Member not found')

    data = member.to_dict()
    data['payments'] = [p.to_dict() for p in member.payments]
    data['gift_delivery'] = member.gift_delivery.to_dict() if member.gift_delivery else None

    audit_log('READ', 'member', resource_id=member_id)

    return jsonify(data), 200


@admin_bp.route('/members/<int:member_id>', methods=['PUT'])
@token_required
@admin_required
def update_member(member_id):
    """Direct edit of any member field except id and password."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    changes, errors = validate_member_edit(data)
    if errors:
        return jsonify({'error': errors}), 400

    existing = storage.get_member(member_id)
    old_status = existing.status if existing else None
    member = apply_admin_edit(member_id, changes)

    audit_log('UPDATE', 'member', resource_id=member_id, details={
        'action': 'admin_edit',
        'fields': sorted(changes),
        'old_status': old_status,
        'new_status': member.status,
    })

    return jsonify(member.to_dict()), 200


@admin_bp.route('/members/<int:member_id>/reset-password', methods=['POST'])
@token_required
@admin_required
def reset_password(member_id):
    member, new_password = reset_member_password(member_id)

    audit_log('UPDATE', 'member', resource_id=member.id,
              details={'action': 'reset_password'})

    return jsonify({
        'message': 'Password reset successfully',
        'new_password': new_password,
    }), 200
