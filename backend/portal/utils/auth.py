"""
Authentication utilities for JWT bearer tokens.

Members and admins receive the same kind of token; the ``role`` claim says
which table ``sub`` refers to.
"""
import secrets
import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, g, current_app

ROLE_MEMBER = 'member'
ROLE_ADMIN = 'admin'


def generate_token(subject_id: int, role: str) -> str:
    """Issue a signed token for a member or admin."""
    now = datetime.now(timezone.utc)
    expires = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']

    payload = {
        'sub': str(subject_id),
        'role': role,
        'jti': secrets.token_hex(16),  # Unique token ID, used for logout
        'iat': now,
        'exp': now + timedelta(seconds=expires),
    }

    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm='HS256')


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Returns None if invalid or expired."""
    try:
        return jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def token_required(f):
    """Decorator to require a valid, unrevoked bearer token.

    Sets g.token_role, g.subject_id, g.token_jti and g.token_exp.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            return jsonify({'error': 'Authentication required'}), 401

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != 'bearer':
            return jsonify({'error': 'Invalid authorization header format'}), 401

        payload = decode_token(parts[1])
        if not payload or payload.get('role') not in (ROLE_MEMBER, ROLE_ADMIN):
            return jsonify({'error': 'Invalid or expired token'}), 401

        from portal.models.revoked_token import RevokedToken
        if RevokedToken.is_token_revoked(payload.get('jti')):
            return jsonify({'error': 'Token has been revoked'}), 401

        try:
            g.subject_id = int(payload['sub'])
        except (KeyError, ValueError):
            return jsonify({'error': 'Invalid or expired token'}), 401
        g.token_role = payload['role']
        g.token_jti = payload.get('jti')
        g.token_exp = payload.get('exp')

        return f(*args, **kwargs)
    return wrapper


def member_required(f):
    """Decorator that requires a member token for an existing member. Sets g.member_id."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        from portal import db
        from portal.models import Member
        if g.token_role != ROLE_MEMBER:
            return jsonify({'error': 'Authentication required'}), 401
        if db.session.get(Member, g.subject_id) is None:
            return jsonify({'error': 'Member not found'}), 401
        g.member_id = g.subject_id
        return f(*args, **kwargs)
    return wrapper
