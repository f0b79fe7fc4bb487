"""
Business errors raised by the service layer.

Each error carries a machine-readable ``kind`` and the HTTP status the API
answers with. They are expected outcomes, rendered as 4xx JSON bodies;
anything else (database unavailable, bugs) stays a 500.
"""
import logging
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class PortalError(Exception):
    kind = 'error'
    status_code = 400
    default_message = 'Request could not be completed'

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self):
        data = {'error': self.message, 'kind': self.kind}
        data.update(self.extra)
        return data


class NotFound(PortalError):
    kind = 'not_found'
    status_code = 404
    default_message = 'Not found'


class ValidationFailed(PortalError):
    kind = 'invalid'
    status_code = 400
    default_message = 'Invalid input data'


class PhoneTaken(PortalError):
    kind = 'phone_taken'
    status_code = 409
    default_message = 'Phone number already registered'


class AlreadyProcessed(PortalError):
    kind = 'already_processed'
    status_code = 409
    default_message = 'Payment has already been processed'


class ClaimDenied(PortalError):
    """A gift claim refused by the authorizer; ``kind`` is the reason."""
    status_code = 409

    MESSAGES = {
        'not_approved': 'Only approved members can request a gift',
        'already_claimed': 'You have already claimed your gift',
        'gift_inactive': 'This gift is no longer available',
        'quota_exhausted': 'This gift is out of stock for this month',
    }

    def __init__(self, reason):
        self.kind = reason
        if reason == 'not_approved':
            self.status_code = 403
        super().__init__(self.MESSAGES.get(reason, 'Gift claim denied'))


class ClaimConflict(PortalError):
    kind = 'conflict'
    status_code = 409
    default_message = 'Too many simultaneous requests for this gift. Please try again.'


def register_error_handlers(app):
    """Render business errors as JSON; roll back on database faults."""
    from portal import db

    @app.errorhandler(PortalError)
    def handle_portal_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error('Database error: %s', error, exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500
