# Purpose: Stored resumes (one row per document) and their edit history.
from __future__ import annotations
import uuid
from sqlalchemy import Boolean, Column, Float, Text, String, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from resumeforge.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(128), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    slug = Column(String(80), nullable=False, unique=True)
    is_public = Column(Boolean, nullable=False, default=True)

    parsed_data = Column(JSONType, nullable=False)
    parse_method = Column(String(32), nullable=True)
    confidence_score = Column(Float, nullable=True)

    original_filename = Column(Text, nullable=True)
    file_type = Column(String(16), nullable=True)
    file_size = Column(Integer, nullable=True)

    additional_context = Column(JSONType, nullable=True)

    view_count = Column(Integer, nullable=False, default=0)
    download_count = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    versions = relationship(
        "ResumeVersion",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ResumeVersion.version_number",
    )


class ResumeVersion(Base):
    __tablename__ = "resume_versions"
    __table_args__ = (UniqueConstraint("resume_id", "version_number", name="uq_resume_versions_resume_version"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resume_id = Column(Uuid(as_uuid=True), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False, index=True)

    version_number = Column(Integer, nullable=False)
    parsed_data = Column(JSONType, nullable=False)
    changes_summary = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    resume = relationship("Resume", back_populates="versions")
