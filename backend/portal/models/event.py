"""
Live event model (Zoom / Vimeo sessions).
"""
from portal import db
from portal.utils.clock import utcnow

EVENT_PLATFORMS = ('zoom', 'vimeo')


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # Kept as the literal string the admin entered to avoid timezone shifts
    event_date = db.Column(db.String(32), nullable=False, index=True)
    platform = db.Column(db.String(20), nullable=False)
    event_url = db.Column(db.String(500), nullable=False)
    replay_url = db.Column(db.String(500), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'event_date': self.event_date,
            'platform': self.platform,
            'event_url': self.event_url,
            'replay_url': self.replay_url,
            'active': self.active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Event {self.id}: {self.title}>'
