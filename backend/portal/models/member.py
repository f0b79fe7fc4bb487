"""
Member model: a registered subscriber identified by phone number.
"""
from werkzeug.security import generate_password_hash, check_password_hash
from portal import db
from portal.utils.clock import utcnow

MEMBER_STATUS_CHOICES = [
    'pending_payment',    # Registered, no payment slip submitted yet
    'pending_approval',   # Slip submitted, waiting for admin verification
    'approved',           # A payment was verified; full member access
    'disapproved',        # Denied by admin; only an admin edit moves it on
]


class Member(db.Model):
    """
    Member account and subscription record.
    membership_start/membership_end are both set or both null.
    """
    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    phone = db.Column(db.String(20), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    prefix = db.Column(db.String(50), nullable=False, default='')
    name = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(30), nullable=False, default='pending_payment', index=True)
    membership_start = db.Column(db.DateTime, nullable=True)
    membership_end = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    payments = db.relationship('Payment', backref='member', lazy='dynamic',
                               order_by='Payment.created_at.desc()')
    reviews = db.relationship('Review', backref='member', lazy='dynamic')

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_approved(self):
        return self.status == 'approved'

    def has_active_membership(self, now=None):
        """True if approved and the membership window covers now."""
        if not self.is_approved or not self.membership_end:
            return False
        now = now or utcnow()
        return self.membership_start <= now <= self.membership_end

    def to_dict(self):
        """Convert to dictionary. The credential hash is never included."""
        return {
            'id': self.id,
            'phone': self.phone,
            'prefix': self.prefix,
            'name': self.name,
            'status': self.status,
            'membership_start': self.membership_start.isoformat() if self.membership_start else None,
            'membership_end': self.membership_end.isoformat() if self.membership_end else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Member {self.id} status={self.status}>'
