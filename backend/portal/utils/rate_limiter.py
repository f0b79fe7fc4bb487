"""
Persistent DB-backed rate limiter for the password endpoints.
"""
from datetime import timedelta
from functools import wraps
from flask import request, jsonify
from portal.utils.clock import utcnow


class DBRateLimiter:
    """Counts attempts per key in a sliding window stored in the database."""

    def __init__(self, max_attempts=5, window_seconds=60, endpoint_name='default'):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.endpoint_name = endpoint_name

    def is_limited(self, key):
        from portal.models.rate_limit_entry import RateLimitEntry
        cutoff = utcnow() - timedelta(seconds=self.window_seconds)
        count = RateLimitEntry.query.filter(
            RateLimitEntry.key == key,
            RateLimitEntry.endpoint == self.endpoint_name,
            RateLimitEntry.timestamp > cutoff
        ).count()
        return count >= self.max_attempts

    def record(self, key):
        from portal import db
        from portal.models.rate_limit_entry import RateLimitEntry
        db.session.add(RateLimitEntry(key=key, endpoint=self.endpoint_name, timestamp=utcnow()))
        db.session.commit()


# Member login: 5 attempts per minute per IP
login_limiter = DBRateLimiter(max_attempts=5, window_seconds=60, endpoint_name='login')

# Admin login: 5 attempts per minute per IP
admin_login_limiter = DBRateLimiter(max_attempts=5, window_seconds=60, endpoint_name='admin_login')

# Registration: 3 attempts per minute per IP
registration_limiter = DBRateLimiter(max_attempts=3, window_seconds=60, endpoint_name='registration')

# Entries older than the longest window are safe to delete
LONGEST_WINDOW_SECONDS = max(
    limiter.window_seconds for limiter in (login_limiter, admin_login_limiter, registration_limiter)
)


def rate_limit(limiter):
    """Decorator factory to rate-limit an endpoint by client IP using a given limiter."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            client_ip = request.remote_addr or 'unknown'
            if limiter.is_limited(client_ip):
                return jsonify({'error': 'Too many attempts. Try again later.'}), 429
            limiter.record(client_ip)
            return f(*args, **kwargs)
        return wrapper
    return decorator
