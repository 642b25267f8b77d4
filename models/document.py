from datetime import datetime, timezone
from models import db, BIGINT


def _utcnow():
    return datetime.now(timezone.utc)


class Document(db.Model):
    """JSON snapshot stored under a unique key (``orders``, ``cart:<user>``...)."""

    __tablename__ = "document"

    id = db.Column(BIGINT, primary_key=True)
    key = db.Column(db.String(120), unique=True, nullable=False, index=True)
    body = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Document key={self.key}>"
