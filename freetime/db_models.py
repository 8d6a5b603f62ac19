from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


class Availability(db.Model):
    __tablename__ = 'availability'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    start_time = db.Column(db.DateTime(timezone=True), nullable=False)
    end_time = db.Column(db.DateTime(timezone=True), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<Availability {self.id} user={self.user_id}: {self.start_time} - {self.end_time}>'


class BlockedSlot(db.Model):
    __tablename__ = 'blocked_slot'

    id = db.Column(db.Integer, primary_key=True)
    # "blocker" is the owning side of this row; its mirror swaps the pairs below
    blocker_id = db.Column(db.Integer, nullable=False, index=True)
    blockee_id = db.Column(db.Integer, nullable=False, index=True)
    # Plain back-references: deleting a row never cascades to the peer window
    blocker_availability_id = db.Column(db.Integer, db.ForeignKey('availability.id'), nullable=False)
    blockee_availability_id = db.Column(db.Integer, db.ForeignKey('availability.id'), nullable=False)
    blocked_start_time = db.Column(db.DateTime(timezone=True), nullable=False)
    blocked_end_time = db.Column(db.DateTime(timezone=True), nullable=False)
    title = db.Column(db.String(255), nullable=True)
    description = db.Column(db.String(1024), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<BlockedSlot {self.id} {self.blocker_id}->{self.blockee_id}: {self.blocked_start_time} - {self.blocked_end_time}>'
