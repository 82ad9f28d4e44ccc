from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.database import Base
from app.services.dates import utcnow


class Institution(Base):
    __tablename__ = "institutions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)


class Profile(Base):
    __tablename__ = "profiles"

    # Same identifier as the auth token subject.
    id = Column(String, primary_key=True, index=True)
    email = Column(String, nullable=True, index=True)
    name = Column(String, nullable=True)
    title = Column(String, nullable=True)
    experience_level = Column(String, nullable=True)
    institution = Column(String, nullable=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=True)
    notes = Column(Text, nullable=True)

    role = Column(String, nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
