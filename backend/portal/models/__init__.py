from .admin import Admin
from .member import Member, MEMBER_STATUS_CHOICES
from .payment import Payment, PAYMENT_STATUS_CHOICES, PAYMENT_DECISIONS
from .gift import Gift, GiftImage, GiftDelivery, DELIVERY_STATUS_CHOICES
from .event import Event, EVENT_PLATFORMS
from .review import Review, REVIEW_STATUS_CHOICES
from .site_content import Terms, SiteSettings
from .revoked_token import RevokedToken
from .rate_limit_entry import RateLimitEntry
