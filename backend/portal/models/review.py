"""
Member review model.
"""
import json
from portal import db
from portal.utils.clock import utcnow

REVIEW_STATUS_CHOICES = ['pending', 'approved', 'rejected']


class Review(db.Model):
    __tablename__ = 'reviews'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    pros = db.Column(db.Text, nullable=True)
    cons = db.Column(db.Text, nullable=True)
    images = db.Column(db.Text, nullable=True)  # JSON array of URLs
    videos = db.Column(db.Text, nullable=True)  # JSON array of URLs
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    helpful = db.Column(db.Integer, nullable=False, default=0)
    not_helpful = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    approved_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'member_name': self.member.name if self.member else None,
            'rating': self.rating,
            'title': self.title,
            'content': self.content,
            'pros': self.pros,
            'cons': self.cons,
            'images': json.loads(self.images) if self.images else [],
            'videos': json.loads(self.videos) if self.videos else [],
            'status': self.status,
            'helpful': self.helpful,
            'not_helpful': self.not_helpful,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'approved_at': self.approved_at.isoformat() if self.approved_at else None,
        }

    def __repr__(self):
        return f'<Review {self.id} member={self.member_id} status={self.status}>'
