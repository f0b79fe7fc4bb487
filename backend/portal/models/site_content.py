"""
Singleton content rows: terms and conditions, and site settings.
Each table holds at most one row, addressed by SINGLETON_ID.
"""
from portal import db
from portal.utils.clock import utcnow

SINGLETON_ID = 1


class _Singleton:
    """Upsert-by-fixed-key helpers shared by the singleton tables."""

    @classmethod
    def get(cls):
        return db.session.get(cls, SINGLETON_ID)

    @classmethod
    def upsert(cls, fields: dict, admin_id=None):
        """Create or update the single row, keeping fields not supplied."""
        row = cls.get()
        if row is None:
            row = cls(id=SINGLETON_ID)
            db.session.add(row)
        for key, value in fields.items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        row.updated_by = admin_id
        return row


class Terms(_Singleton, db.Model):
    __tablename__ = 'terms'

    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False, default='')
    show_on_registration = db.Column(db.Boolean, nullable=False, default=True)
    show_on_payment = db.Column(db.Boolean, nullable=False, default=True)
    require_read = db.Column(db.Boolean, nullable=False, default=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_by = db.Column(db.Integer, db.ForeignKey('admins.id', ondelete='SET NULL'), nullable=True)

    def to_dict(self):
        return {
            'content': self.content,
            'show_on_registration': self.show_on_registration,
            'show_on_payment': self.show_on_payment,
            'require_read': self.require_read,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'updated_by': self.updated_by,
        }


class SiteSettings(_Singleton, db.Model):
    __tablename__ = 'site_settings'

    id = db.Column(db.Integer, primary_key=True)
    membership_price = db.Column(db.Integer, nullable=False, default=499)
    bank_name = db.Column(db.String(200), nullable=False, default='')
    bank_account = db.Column(db.String(50), nullable=False, default='')
    bank_account_name = db.Column(db.String(200), nullable=False, default='')
    line_url = db.Column(db.String(500), nullable=False, default='')
    qr_code_path = db.Column(db.String(500), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_by = db.Column(db.Integer, db.ForeignKey('admins.id', ondelete='SET NULL'), nullable=True)

    def to_dict(self):
        return {
            'membership_price': self.membership_price,
            'bank_name': self.bank_name,
            'bank_account': self.bank_account,
            'bank_account_name': self.bank_account_name,
            'line_url': self.line_url,
            'qr_code_path': self.qr_code_path,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'updated_by': self.updated_by,
        }
