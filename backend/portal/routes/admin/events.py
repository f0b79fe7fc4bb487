"""Admin live event routes."""
from flask import request, jsonify
from portal import db
from portal.models import Event
from portal.services import NotFound
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from portal.utils.validators import validate_event
from . import admin_bp, admin_required

EVENT_FIELDS = ('title', 'description', 'event_date', 'platform', 'event_url', 'replay_url', 'active')


@admin_bp.route('/events', methods=['GET'])
@token_required
@admin_required
def list_all_events():
    events = Event.query.order_by(Event.event_date.desc()).all()
    return jsonify([e.to_dict() for e in events]), 200


@admin_bp.route('/events', methods=['POST'])
@token_required
@admin_required
def create_event():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_event(data)
    if errors:
        return jsonify({'error': errors}), 400

    event = Event(**{k: data[k] for k in EVENT_FIELDS if k in data})
    db.session.add(event)
    db.session.commit()

    audit_log('CREATE', 'event', resource_id=event.id)

    return jsonify(event.to_dict()), 201


@admin_bp.route('/events/<int:event_id>', methods=['PUT'])
@token_required
@admin_required
def update_event(event_id):
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_event(data, partial=True)
    if errors:
        return jsonify({'error': errors}), 400

    event = db.session.get(Event, event_id)
    if not event:
        raise NotFound('Event not found')

    for field in EVENT_FIELDS:
        if field in data:
            setattr(event, field, data[field])
    db.session.commit()

    audit_log('UPDATE', 'event', resource_id=event_id)

    return jsonify(event.to_dict()), 200


@admin_bp.route('/events/<int:event_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_event(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFound('Event not found')

    db.session.delete(event)
    db.session.commit()

    audit_log('DELETE', 'event', resource_id=event_id)

    return jsonify({'message': 'Event deleted successfully'}), 200
