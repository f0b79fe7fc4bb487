"""
Input validation for registration, payments, gift deliveries and admin edits.
Validators return a list of error strings (empty = valid).
"""
import re
from datetime import datetime, timezone
from portal.models import (
    MEMBER_STATUS_CHOICES, DELIVERY_STATUS_CHOICES, EVENT_PLATFORMS,
)

PHONE_RE = re.compile(r'^0\d{8,9}$')
POSTAL_CODE_RE = re.compile(r'^\d{5}$')

DELIVERY_FIELDS = (
    'delivery_name', 'delivery_phone', 'house_number', 'moo_soi', 'street',
    'subdistrict', 'district', 'province', 'postal_code', 'delivery_date',
)
_REQUIRED_DELIVERY_FIELDS = (
    'delivery_name', 'delivery_phone', 'house_number',
    'subdistrict', 'district', 'province', 'postal_code',
)


def parse_datetime(value):
    """Parse an ISO-8601 string into a naive UTC datetime. None/'' -> None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _check_datetime(value, label, errors, required=False):
    if value is None or value == '':
        if required:
            errors.append(f'{label} is required')
        return
    try:
        parse_datetime(value)
    except (ValueError, TypeError):
        errors.append(f'{label} must be an ISO-8601 date')


def _check_int(value, label, errors, minimum=None, maximum=None):
    if isinstance(value, bool):
        errors.append(f'{label} must be an integer')
        return
    try:
        number = int(value)
    except (ValueError, TypeError):
        errors.append(f'{label} must be an integer')
        return
    if minimum is not None and number < minimum:
        errors.append(f'{label} must be at least {minimum}')
    if maximum is not None and number > maximum:
        errors.append(f'{label} must be at most {maximum}')


def _check_phone(phone, errors, label='Phone'):
    phone = str(phone or '').strip()
    if not phone:
        errors.append(f'{label} is required')
    elif not PHONE_RE.match(phone):
        errors.append(f'{label} must be 9-10 digits starting with 0')


def validate_registration(data: dict) -> list:
    errors = []

    _check_phone(data.get('phone'), errors)

    password = data.get('password') or ''
    if len(password) < 6:
        errors.append('Password must be at least 6 characters')

    name = str(data.get('name') or '').strip()
    if not name:
        errors.append('Name is required')
    if len(name) > 200:
        errors.append('Name must be 200 characters or fewer')

    if len(str(data.get('prefix') or '')) > 50:
        errors.append('Prefix must be 50 characters or fewer')

    return errors


def validate_profile_update(data: dict) -> list:
    errors = []

    if 'phone' in data:
        _check_phone(data.get('phone'), errors)

    if 'name' in data:
        name = str(data.get('name') or '').strip()
        if not name:
            errors.append('Name cannot be empty')
        if len(name) > 200:
            errors.append('Name must be 200 characters or fewer')

    if 'prefix' in data and len(str(data.get('prefix') or '')) > 50:
        errors.append('Prefix must be 50 characters or fewer')

    return errors


def validate_payment(data: dict) -> list:
    errors = []

    if data.get('amount') is None:
        errors.append('Amount is required')
    else:
        _check_int(data['amount'], 'Amount', errors, minimum=1)

    slip_url = data.get('slip_url')
    if slip_url is not None and len(str(slip_url)) > 500:
        errors.append('Slip URL must be 500 characters or fewer')

    return errors


def validate_gift_delivery(data: dict) -> list:
    errors = []

    if data.get('gift_id') is None:
        errors.append('Gift ID is required')
    else:
        _check_int(data['gift_id'], 'Gift ID', errors)

    for field in _REQUIRED_DELIVERY_FIELDS:
        if not str(data.get(field) or '').strip():
            errors.append(f'{field} is required')

    if data.get('delivery_phone'):
        _check_phone(data['delivery_phone'], errors, label='Delivery phone')

    postal_code = str(data.get('postal_code') or '').strip()
    if postal_code and not POSTAL_CODE_RE.match(postal_code):
        errors.append('Postal code must be 5 digits')

    _check_datetime(data.get('delivery_date'), 'Delivery date', errors, required=True)

    return errors


def extract_delivery_fields(data: dict) -> dict:
    """Whitelisted, cleaned delivery fields from a validated request body."""
    fields = {}
    for field in DELIVERY_FIELDS:
        value = data.get(field)
        if field == 'delivery_date':
            value = parse_datetime(value)
        elif isinstance(value, str):
            value = value.strip() or None
        fields[field] = value
    return fields


def validate_delivery_update(data: dict) -> list:
    errors = []

    status = data.get('status')
    if status is not None and status not in DELIVERY_STATUS_CHOICES:
        errors.append(f'Invalid status. Must be one of: {DELIVERY_STATUS_CHOICES}')

    if len(str(data.get('tracking_number') or '')) > 100:
        errors.append('Tracking number must be 100 characters or fewer')
    if len(str(data.get('tracking_url') or '')) > 500:
        errors.append('Tracking URL must be 500 characters or fewer')

    return errors


def validate_gift(data: dict, partial=False) -> list:
    errors = []

    if not partial or 'name' in data:
        name = str(data.get('name') or '').strip()
        if not name:
            errors.append('Name is required')
        if len(name) > 200:
            errors.append('Name must be 200 characters or fewer')

    if data.get('monthly_quota') is not None:
        _check_int(data['monthly_quota'], 'Monthly quota', errors, minimum=0)

    for field in ('description', 'details', 'image_url'):
        if field in data and not isinstance(data[field], str):
            errors.append(f'{field} must be a string')

    if 'active' in data and not isinstance(data['active'], bool):
        errors.append('active must be a boolean')

    return errors


def validate_member_edit(data: dict):
    """
    Validate an admin member edit. Returns (changes, errors) where changes
    has timestamps parsed into datetimes.
    """
    errors = []
    changes = {}

    if 'status' in data:
        if data['status'] not in MEMBER_STATUS_CHOICES:
            errors.append(f'Invalid status. Must be one of: {MEMBER_STATUS_CHOICES}')
        else:
            changes['status'] = data['status']

    if 'phone' in data:
        _check_phone(data['phone'], errors)
        changes['phone'] = str(data['phone'] or '').strip()

    for field in ('name', 'prefix'):
        if field in data:
            changes[field] = str(data[field] or '').strip()
    if 'name' in changes and not changes['name']:
        errors.append('Name cannot be empty')

    for field in ('membership_start', 'membership_end', 'created_at'):
        if field in data:
            try:
                changes[field] = parse_datetime(data[field])
            except (ValueError, TypeError):
                errors.append(f'{field} must be an ISO-8601 date')
    if 'created_at' in changes and changes['created_at'] is None:
        errors.append('created_at cannot be empty')

    return changes, errors


def validate_event(data: dict, partial=False) -> list:
    errors = []

    for field in ('title', 'event_date', 'platform', 'event_url'):
        if (not partial or field in data) and not str(data.get(field) or '').strip():
            errors.append(f'{field} is required')

    for field in ('title', 'description', 'event_date', 'platform', 'event_url', 'replay_url'):
        if data.get(field) is not None and not isinstance(data[field], str):
            errors.append(f'{field} must be a string')

    if isinstance(data.get('event_date'), str) and data['event_date']:
        _check_datetime(data['event_date'], 'Event date', errors)

    platform = data.get('platform')
    if platform and platform not in EVENT_PLATFORMS:
        errors.append(f'Platform must be one of: {list(EVENT_PLATFORMS)}')

    if 'active' in data and not isinstance(data['active'], bool):
        errors.append('active must be a boolean')

    return errors


def validate_review(data: dict) -> list:
    errors = []

    if data.get('rating') is None:
        errors.append('Rating is required')
    else:
        _check_int(data['rating'], 'Rating', errors, minimum=1, maximum=5)

    title = str(data.get('title') or '').strip()
    if not title:
        errors.append('Title is required')
    if len(title) > 255:
        errors.append('Title must be 255 characters or fewer')

    if not str(data.get('content') or '').strip():
        errors.append('Content is required')

    for field in ('images', 'videos'):
        value = data.get(field)
        if value is not None and (not isinstance(value, list)
                                  or not all(isinstance(v, str) for v in value)):
            errors.append(f'{field} must be a list of URLs')

    for field in ('pros', 'cons'):
        if data.get(field) is not None and not isinstance(data[field], str):
            errors.append(f'{field} must be a string')

    return errors


def validate_gift_image(data: dict) -> list:
    errors = []

    if data.get('gift_id') is None:
        errors.append('Gift ID is required')
    else:
        _check_int(data['gift_id'], 'Gift ID', errors)

    image_url = data.get('image_url')
    if not isinstance(image_url, str) or not image_url.strip():
        errors.append('image_url is required')
    elif len(image_url) > 500:
        errors.append('image_url must be 500 characters or fewer')

    if data.get('sort_order') is not None:
        _check_int(data['sort_order'], 'Sort order', errors)

    return errors
