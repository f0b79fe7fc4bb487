"""
Revoked token model for bearer-token logout.
"""
from portal import db
from portal.utils.clock import utcnow


class RevokedToken(db.Model):
    """Tracks revoked JWT ids until the token would have expired anyway."""
    __tablename__ = 'revoked_tokens'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), unique=True, nullable=False, index=True)
    subject = db.Column(db.String(64), nullable=False)  # e.g. 'member:12'
    revoked_at = db.Column(db.DateTime, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)

    @staticmethod
    def is_token_revoked(jti):
        return db.session.query(
            db.exists().where(RevokedToken.jti == jti)
        ).scalar()

    @staticmethod
    def revoke(jti, subject, expires_at):
        if RevokedToken.is_token_revoked(jti):
            return
        db.session.add(RevokedToken(jti=jti, subject=subject, expires_at=expires_at))
        db.session.commit()

    @staticmethod
    def cleanup_expired():
        """Delete entries whose tokens have expired."""
        count = RevokedToken.query.filter(
            RevokedToken.expires_at < utcnow()
        ).delete()
        db.session.commit()
        return count

    def __repr__(self):
        return f'<RevokedToken {self.jti} {self.subject}>'
