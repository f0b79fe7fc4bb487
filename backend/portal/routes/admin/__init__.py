"""
Admin API routes.
"""
from functools import wraps
from flask import Blueprint, jsonify, g
from portal import db
from portal.models import Admin
from portal.utils.auth import ROLE_ADMIN

admin_bp = Blueprint('admin', __name__)


def admin_required(f):
    """Decorator that requires an admin token for an existing admin. Sets g.admin_id."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        if g.token_role != ROLE_ADMIN or db.session.get(Admin, g.subject_id) is None:
            return jsonify({'error': 'Admin access required'}), 403
        g.admin_id = g.subject_id
        return f(*args, **kwargs)
    return wrapper


# Import submodules to register routes on admin_bp
from . import accounts   # noqa: E402, F401
from . import members    # noqa: E402, F401
from . import payments   # noqa: E402, F401
from . import gifts      # noqa: E402, F401
from . import events     # noqa: E402, F401
from . import reviews    # noqa: E402, F401
from . import content    # noqa: E402, F401
from . import stats      # noqa: E402, F401
