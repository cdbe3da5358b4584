"""
SQLAlchemy ORM models for users, job applications and their child records.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    applications = relationship("Application", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        Index("ix_applications_user_status", "user_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_name = Column(String(255), nullable=False)
    position_title = Column(String(255), nullable=False)
    job_description = Column(Text)
    location = Column(String(255))
    salary_range = Column(String(100))
    job_url = Column(Text)
    status = Column(String(32), nullable=False, default="applied")
    priority = Column(String(16), nullable=False, default="medium")
    applied_date = Column(Date, nullable=False)
    follow_up_date = Column(Date)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="applications")
    status_history = relationship("StatusHistory", back_populates="application", cascade="all, delete-orphan", passive_deletes=True)
    contacts = relationship("Contact", back_populates="application", cascade="all, delete-orphan", passive_deletes=True)
    interviews = relationship("Interview", back_populates="application", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("Document", back_populates="application", cascade="all, delete-orphan", passive_deletes=True)


class StatusHistory(Base):
    __tablename__ = "status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(32), nullable=False)
    notes = Column(Text)
    changed_at = Column(DateTime(timezone=True), default=_utcnow)

    application = relationship("Application", back_populates="status_history")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(255))
    email = Column(String(255))
    phone = Column(String(50))
    linkedin_url = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    application = relationship("Application", back_populates="contacts")


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    interview_type = Column(String(64), nullable=False)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    duration_minutes = Column(Integer)
    location = Column(String(255))
    interviewer_names = Column(Text)
    notes = Column(Text)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    application = relationship("Application", back_populates="interviews")


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type = Column(String(64), nullable=False)
    file_name = Column(String(512), nullable=False)
    file_url = Column(Text, nullable=False)
    s3_key = Column(Text, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=_utcnow)

    application = relationship("Application", back_populates="documents")
