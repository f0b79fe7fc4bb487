"""Admin login and admin account management routes."""
from flask import request, jsonify, g
from portal import db
from portal.models import Admin
from portal.utils.auth import generate_token, token_required, ROLE_ADMIN
from portal.utils.audit_logger import audit_log
from portal.utils.rate_limiter import rate_limit, admin_login_limiter
from . import admin_bp, admin_required


@admin_bp.route('/auth/login', methods=['POST'])
@rate_limit(admin_login_limiter)
def admin_login():
    data = request.get_json() or {}
    username = str(data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        return jsonify({'error': 'Username and password are required'}), 400

    admin = Admin.query.filter_by(username=username).first()
    if not admin or not admin.check_password(password):
        audit_log('LOGIN_FAILED', 'admin',
                  details={'reason': 'bad_credentials'}, actor='anonymous')
        return jsonify({'error': 'Invalid username or password'}), 401

    token = generate_token(admin.id, ROLE_ADMIN)
    audit_log('LOGIN', 'admin', resource_id=admin.id, actor=f'admin:{admin.id}')

    return jsonify({'token': token, 'admin': admin.to_dict()}), 200


@admin_bp.route('/auth/me', methods=['GET'])
@token_required
@admin_required
def admin_me():
    admin = db.session.get(Admin, g.admin_id)
    return jsonify(admin.to_dict()), 200


@admin_bp.route('/admins', methods=['GET'])
@token_required
@admin_required
def list_admins():
    admins = Admin.query.order_by(Admin.created_at).all()
    return jsonify([a.to_dict() for a in admins]), 200


@admin_bp.route('/admins', methods=['POST'])
@token_required
@admin_required
def create_admin():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    username = str(data.get('username') or '').strip()
    password = data.get('password') or ''
    errors = []
    if not username:
        errors.append('Username is required')
    if len(username) > 100:
        errors.append('Username must be 100 characters or fewer')
    if len(password) < 6:
        errors.append('Password must be at least 6 characters')
    if errors:
        return jsonify({'error': errors}), 400

    if Admin.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 409

    admin = Admin(username=username)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()

    audit_log('CREATE', 'admin', resource_id=admin.id)

    return jsonify(admin.to_dict()), 201


@admin_bp.route('/admins/<int:admin_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_admin(admin_id):
    if admin_id == g.admin_id:
        return jsonify({'error': 'Cannot delete your own account'}), 400

    admin = db.session.get(Admin, admin_id)
    if not admin:
        return jsonify({'error': 'Admin not found'}), 404

    db.session.delete(admin)
    db.session.commit()

    audit_log('DELETE', 'admin', resource_id=admin_id)

    return jsonify({'message': 'Admin deleted successfully'}), 200
