"""
Audit logging for member and admin actions.
Writes one JSON line per event with timestamp, actor, action and resource.
"""
import os
import logging
import structlog
from datetime import datetime, timezone
from flask import request, g, has_request_context


def setup_audit_logging(app):
    """Configure structlog JSON output and the audit file handler."""

    log_file = app.config['AUDIT_LOG_FILE']
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter('%(message)s'))

    audit_logger = logging.getLogger('audit')
    audit_logger.setLevel(logging.INFO)
    # One handler per process, even when several apps are created (tests)
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()
    audit_logger.addHandler(file_handler)

    app.config['AUDIT_LOGGER'] = structlog.get_logger('audit')


def get_audit_logger():
    from flask import current_app
    return current_app.config.get('AUDIT_LOGGER', structlog.get_logger('audit'))


def _current_actor():
    """'admin:<id>', 'member:<id>' or 'anonymous' for the current request."""
    if getattr(g, 'admin_id', None) is not None:
        return f'admin:{g.admin_id}'
    if getattr(g, 'member_id', None) is not None:
        return f'member:{g.member_id}'
    return 'anonymous'


def audit_log(action: str, resource_type: str, resource_id=None,
              details: dict = None, actor: str = None):
    """
    Record an audit event.

    Args:
        action: CREATE, READ, UPDATE, DELETE, LOGIN, LOGIN_FAILED, ...
        resource_type: member, payment, gift, gift_delivery, ...
        resource_id: ID of the affected resource (optional)
        details: extra context (optional)
        actor: who acted; defaults to the authenticated admin or member
    """
    logger = get_audit_logger()

    in_request = has_request_context()
    log_entry = {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'action': action,
        'resource_type': resource_type,
        'resource_id': str(resource_id) if resource_id is not None else None,
        'actor': actor or (_current_actor() if in_request else 'system'),
        'client_ip': request.remote_addr if in_request else None,
        'details': details or {},
    }

    logger.info("audit_event", **log_entry)
