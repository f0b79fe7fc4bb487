"""
Payment model: one bank-transfer slip submitted by a member.
"""
from portal import db
from portal.utils.clock import utcnow

# pending -> verified | rejected; both outcomes are final
PAYMENT_STATUS_CHOICES = ['pending', 'verified', 'rejected']
PAYMENT_DECISIONS = ('verified', 'rejected')


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)  # baht
    slip_url = db.Column(db.String(500), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    verified_at = db.Column(db.DateTime, nullable=True)
    verified_by = db.Column(db.Integer, db.ForeignKey('admins.id', ondelete='SET NULL'), nullable=True)

    verified_by_admin = db.relationship('Admin', foreign_keys=[verified_by])

    @property
    def is_pending(self):
        return self.status == 'pending'

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'amount': self.amount,
            'slip_url': self.slip_url,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'verified_at': self.verified_at.isoformat() if self.verified_at else None,
            'verified_by': self.verified_by,
        }

    def __repr__(self):
        return f'<Payment {self.id} member={self.member_id} status={self.status}>'
