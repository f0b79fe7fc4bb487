"""
Gift catalog and gift delivery models.
"""
from portal import db
from portal.utils.clock import utcnow

# 'pending' and 'sent' drive the workflow; the others are display labels
DELIVERY_STATUS_CHOICES = ['pending', 'processing', 'shipped', 'delivered', 'sent']


class Gift(db.Model):
    """
    A catalog item members can claim.
    monthly_quota of None means unlimited claims per calendar month.
    """
    __tablename__ = 'gifts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    details = db.Column(db.Text, nullable=False, default='')
    image_url = db.Column(db.String(500), nullable=False, default='')
    active = db.Column(db.Boolean, nullable=False, default=True)
    monthly_quota = db.Column(db.Integer, nullable=True)

    deliveries = db.relationship('GiftDelivery', backref='gift', lazy='dynamic')
    images = db.relationship('GiftImage', backref='gift', lazy='dynamic',
                             cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'details': self.details,
            'image_url': self.image_url,
            'active': self.active,
            'monthly_quota': self.monthly_quota,
        }

    def __repr__(self):
        return f'<Gift {self.id}: {self.name}>'


class GiftImage(db.Model):
    """Extra gallery image for a gift, shown in sort_order (lowest first)."""
    __tablename__ = 'gift_images'

    id = db.Column(db.Integer, primary_key=True)
    gift_id = db.Column(db.Integer, db.ForeignKey('gifts.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    image_url = db.Column(db.String(500), nullable=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'gift_id': self.gift_id,
            'image_url': self.image_url,
            'sort_order': self.sort_order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<GiftImage {self.id} gift={self.gift_id}>'


class GiftDelivery(db.Model):
    """
    A member's claim of one gift, with the shipping address and tracking.

    A member holds at most one delivery (unique member_id). Deliveries of a
    quota-limited gift each take a numbered slot within their month, so two
    concurrent claims can never both take the last unit.
    """
    __tablename__ = 'gift_deliveries'
    __table_args__ = (
        db.UniqueConstraint('gift_id', 'quota_period', 'quota_slot',
                            name='uq_gift_deliveries_quota_slot'),
    )

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, unique=True)
    gift_id = db.Column(db.Integer, db.ForeignKey('gifts.id'), nullable=False, index=True)

    # Recipient and address
    delivery_name = db.Column(db.String(200), nullable=False)
    delivery_phone = db.Column(db.String(20), nullable=False)
    house_number = db.Column(db.String(50), nullable=False)
    moo_soi = db.Column(db.String(100), nullable=True)
    street = db.Column(db.String(200), nullable=True)
    subdistrict = db.Column(db.String(100), nullable=False)
    district = db.Column(db.String(100), nullable=False)
    province = db.Column(db.String(100), nullable=False)
    postal_code = db.Column(db.String(10), nullable=False)
    delivery_date = db.Column(db.DateTime, nullable=False)

    status = db.Column(db.String(20), nullable=False, default='pending')
    tracking_number = db.Column(db.String(100), nullable=True)
    tracking_url = db.Column(db.String(500), nullable=True)

    # Quota allocation: 'YYYY-MM' and 1..monthly_quota, null for unlimited gifts
    quota_period = db.Column(db.String(7), nullable=True)
    quota_slot = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    member = db.relationship('Member', backref=db.backref('gift_delivery', uselist=False))

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'gift_id': self.gift_id,
            'gift_name': self.gift.name if self.gift else None,
            'delivery_name': self.delivery_name,
            'delivery_phone': self.delivery_phone,
            'house_number': self.house_number,
            'moo_soi': self.moo_soi,
            'street': self.street,
            'subdistrict': self.subdistrict,
            'district': self.district,
            'province': self.province,
            'postal_code': self.postal_code,
            'delivery_date': self.delivery_date.isoformat() if self.delivery_date else None,
            'status': self.status,
            'tracking_number': self.tracking_number,
            'tracking_url': self.tracking_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<GiftDelivery {self.id} member={self.member_id} gift={self.gift_id} status={self.status}>'
