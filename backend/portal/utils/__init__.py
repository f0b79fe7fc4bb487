from .clock import utcnow
from .audit_logger import audit_log
from .auth import generate_token, token_required, member_required
