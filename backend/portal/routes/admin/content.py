"""Admin routes for the terms and site settings singletons."""
from flask import request, jsonify, g
from portal import db
from portal.models import Terms, SiteSettings
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from . import admin_bp, admin_required

TERMS_FIELDS = {
    'content': str,
    'show_on_registration': bool,
    'show_on_payment': bool,
    'require_read': bool,
}

SETTINGS_FIELDS = {
    'membership_price': int,
    'bank_name': str,
    'bank_account': str,
    'bank_account_name': str,
    'line_url': str,
    'qr_code_path': str,
}


def _typed_fields(data, field_types):
    """Pick known fields and check their JSON types. Returns (fields, errors)."""
    fields, errors = {}, []
    for name, kind in field_types.items():
        if name not in data:
            continue
        value = data[name]
        if kind is int and (isinstance(value, bool) or not isinstance(value, int)):
            errors.append(f'{name} must be an integer')
        elif kind is not int and not isinstance(value, kind):
            errors.append(f'{name} must be a {kind.__name__}')
        else:
            fields[name] = value
    return fields, errors


@admin_bp.route('/terms', methods=['GET'])
@token_required
@admin_required
def get_terms():
    terms = Terms.get()
    return jsonify(terms.to_dict() if terms else None), 200


@admin_bp.route('/terms', methods=['PUT'])
@token_required
@admin_required
def update_terms():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    fields, errors = _typed_fields(data, TERMS_FIELDS)
    if errors:
        return jsonify({'error': errors}), 400
    if Terms.get() is None and not str(fields.get('content') or '').strip():
        return jsonify({'error': ['content is required']}), 400

    terms = Terms.upsert(fields, admin_id=g.admin_id)
    db.session.commit()

    audit_log('UPDATE', 'terms', details={'fields': sorted(fields)})

    return jsonify(terms.to_dict()), 200


@admin_bp.route('/site-settings', methods=['GET'])
@token_required
@admin_required
def get_site_settings():
    settings = SiteSettings.get()
    return jsonify(settings.to_dict() if settings else None), 200


@admin_bp.route('/site-settings', methods=['PUT'])
@token_required
@admin_required
def update_site_settings():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    fields, errors = _typed_fields(data, SETTINGS_FIELDS)
    if fields.get('membership_price') is not None and fields['membership_price'] < 0:
        errors.append('membership_price cannot be negative')
    if errors:
        return jsonify({'error': errors}), 400

    settings = SiteSettings.upsert(fields, admin_id=g.admin_id)
    db.session.commit()

    audit_log('UPDATE', 'site_settings', details={'fields': sorted(fields)})

    return jsonify(settings.to_dict()), 200
