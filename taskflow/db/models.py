# taskflow/db/models.py
from datetime import datetime, timezone

from sqlalchemy import ( Column, Integer, String, ForeignKey, DateTime, Date, Text, CheckConstraint )
from sqlalchemy.orm import relationship
from sqlalchemy.ext.declarative import declarative_base

Base = declarative_base()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything is stored in UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    __table_args__ = ( CheckConstraint("role IN ('user', 'admin')"), )
    tasks = relationship("Task", back_populates="owner", cascade="all, delete-orphan")

class Task(TimestampMixin, Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="incomplete")
    priority = Column(String(20), nullable=False, default="medium")
    due_date = Column(Date, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    __table_args__ = (
        CheckConstraint("status IN ('incomplete', 'complete')"),
        CheckConstraint("priority IN ('low', 'medium', 'high')"),
    )
    owner = relationship("User", back_populates="tasks")

class UserLog(TimestampMixin, Base):
    __tablename__ = "user_logs"
    id = Column(Integer, primary_key=True, index=True)
    # No FK: audit rows outlive the user they describe.
    user_id = Column(Integer, nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    user_email = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False)
    action = Column(String(10), nullable=False)
    login_time = Column(DateTime(timezone=True), nullable=True)
    logout_time = Column(DateTime(timezone=True), nullable=True)
    token_id = Column(String(32), nullable=False, index=True)
    ip_address = Column(String(64), nullable=False, default="Unknown")
    user_agent = Column(String(512), nullable=False, default="Unknown")
    session_duration = Column(Integer, nullable=True)
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')"),
        CheckConstraint("action IN ('login', 'logout')"),
        CheckConstraint(
            "(action = 'login' AND login_time IS NOT NULL) OR (action = 'logout' AND logout_time IS NOT NULL)"
        ),
    )
