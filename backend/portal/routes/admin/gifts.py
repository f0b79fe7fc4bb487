"""Admin gift catalog, gift image and gift delivery routes."""
from flask import request, jsonify
from portal import db, storage
from portal.models import GiftDelivery, DELIVERY_STATUS_CHOICES
from portal.services import catalog_entry, gift_catalog, NotFound
from portal.utils.auth import token_required
from portal.utils.audit_logger import audit_log
from portal.utils.validators import validate_gift, validate_gift_image, validate_delivery_update
from . import admin_bp, admin_required

GIFT_FIELDS = ('name', 'description', 'details', 'image_url', 'active', 'monthly_quota')


def _gift_fields(data):
    fields = {k: data[k] for k in GIFT_FIELDS if k in data}
    if fields.get('monthly_quota') is not None:
        fields['monthly_quota'] = int(fields['monthly_quota'])
    return fields


@admin_bp.route('/gifts-catalog', methods=['GET'])
@token_required
@admin_required
def gifts_catalog():
    """All gifts, active or not, with this month's quota usage and images."""
    return jsonify(gift_catalog()), 200


@admin_bp.route('/gifts', methods=['POST'])
@token_required
@admin_required
def create_gift():
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_gift(data)
    if errors:
        return jsonify({'error': errors}), 400

    gift = storage.create_gift(**_gift_fields(data))
    db.session.commit()

    audit_log('CREATE', 'gift', resource_id=gift.id)

    return jsonify(catalog_entry(gift)), 201


@admin_bp.route('/gifts/<int:gift_id>', methods=['PUT'])
@token_required
@admin_required
def update_gift(gift_id):
    """Edit a gift. Lowering monthly_quota below this month's usage is allowed."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_gift(data, partial=True)
    if errors:
        return jsonify({'error': errors}), 400

    fields = _gift_fields(data)
    gift = storage.update_gift(gift_id, **fields)
    if gift is None:
        raise NotFound('Gift not found')
    db.session.commit()

    audit_log('UPDATE', 'gift', resource_id=gift_id, details={'fields': sorted(fields)})

    return jsonify(catalog_entry(gift)), 200


@admin_bp.route('/gift-images', methods=['POST'])
@token_required
@admin_required
def create_gift_image():
    """Add a gallery image to a gift. Body: {"gift_id", "image_url", "sort_order"?}."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_gift_image(data)
    if errors:
        return jsonify({'error': errors}), 400

    gift_id = int(data['gift_id'])
    if storage.get_gift(gift_id) is None:
        raise NotFound('Gift not found')

    image = storage.create_gift_image(
        gift_id=gift_id,
        image_url=str(data['image_url']).strip(),
        sort_order=int(data.get('sort_order') or 0),
    )
    db.session.commit()

    audit_log('CREATE', 'gift_image', resource_id=image.id, details={'gift_id': gift_id})

    return jsonify(image.to_dict()), 201


@admin_bp.route('/gift-images/<int:image_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_gift_image(image_id):
    image = storage.get_gift_image(image_id)
    if not image:
        raise NotFound('Gift image not found')

    gift_id = image.gift_id
    storage.delete_gift_image(image)
    db.session.commit()

    audit_log('DELETE', 'gift_image', resource_id=image_id, details={'gift_id': gift_id})

    return jsonify({'message': 'Gift image deleted successfully'}), 200


@admin_bp.route('/gift-deliveries', methods=['GET'])
@token_required
@admin_required
def list_gift_deliveries():
    status_filter = request.args.get('status')

    query = GiftDelivery.query
    if status_filter:
        query = query.filter_by(status=status_filter)
    deliveries = query.order_by(GiftDelivery.created_at.desc()).all()

    result = []
    for delivery in deliveries:
        data = delivery.to_dict()
        data['member_name'] = delivery.member.name if delivery.member else None
        result.append(data)

    summary = {
        status: GiftDelivery.query.filter_by(status=status).count()
        for status in DELIVERY_STATUS_CHOICES
    }

    return jsonify({'deliveries': result, 'summary': summary}), 200


@admin_bp.route('/gift-deliveries/<int:delivery_id>', methods=['PUT'])
@token_required
@admin_required
def update_gift_delivery(delivery_id):
    """Fill in tracking details and move the delivery status along."""
    data = request.get_json()
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    errors = validate_delivery_update(data)
    if errors:
        return jsonify({'error': errors}), 400

    delivery = db.session.get(GiftDelivery, delivery_id)
    if not delivery:
        raise NotFound('Gift delivery not found')

    for field in ('tracking_number', 'tracking_url', 'status'):
        if field in data and data[field] is not None:
            setattr(delivery, field, str(data[field]).strip())
    db.session.commit()

    audit_log('UPDATE', 'gift_delivery', resource_id=delivery_id, details={
        'status': delivery.status,
        'tracking_number': delivery.tracking_number,
    })

    return jsonify(delivery.to_dict()), 200
