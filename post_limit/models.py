from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()

def _utcnow():
    """Return current UTC time as a naive datetime (SQLite doesn't store tz info)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

class Form(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True)
    alias = Column(String, nullable=False, unique=True, index=True)
    title = Column(String, nullable=True)
    form_type = Column(String, nullable=False)  # "login_require" | "guest"
    form_details = Column(Text, nullable=True)  # JSON settings blob

    def to_dict(self):
        return {
            "id": self.id,
            "alias": self.alias,
            "title": self.title,
            "form_type": self.form_type,
            "form_details": self.form_details,
        }


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True)
    author_id = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=True)
    status = Column(String, nullable=False, default="draft")  # publish | draft | pending | future | trash
    created_at = Column(DateTime, default=_utcnow, index=True)  # naive, in the store timezone

    def to_dict(self):
        return {
            "id": self.id,
            "author_id": self.author_id,
            "title": self.title,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
