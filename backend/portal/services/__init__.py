from .errors import (
    PortalError, NotFound, ValidationFailed, PhoneTaken,
    AlreadyProcessed, ClaimDenied, ClaimConflict,
)
from .quota import month_bounds, remaining_quota, quota_usage
from .catalog import catalog_entry, gift_catalog
from .gift_claims import ClaimDecision, authorize_claim, claim_gift
from .membership import register_member, submit_payment, apply_admin_edit, reset_member_password
from .payments import verify_payment
