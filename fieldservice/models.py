import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp with microsecond resolution"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    profiles = relationship("Profile", back_populates="company")
    team_members = relationship("TeamMember", back_populates="company")


class Profile(Base):
    """An authenticated person; role decides what they may do"""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    auth_id = Column(String(255), unique=True, index=True, nullable=False)  # Token subject
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=True, index=True)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, index=True)  # admin, manager, customer, team
    # Location privacy settings
    location_tracking_enabled = Column(Boolean, default=False, nullable=False)
    location_share_accuracy = Column(Boolean, default=True, nullable=False)
    location_track_only_during_shift = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    company = relationship("Company", back_populates="profiles")
    customer = relationship("Customer", back_populates="profile", uselist=False)
    team_member = relationship("TeamMember", back_populates="profile", uselist=False)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=True, index=True)
    business_name = Column(String(255), nullable=True)
    service_address = Column(Text, nullable=True)
    billing_address = Column(Text, nullable=True)
    special_instructions = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    profile = relationship("Profile", back_populates="customer")


class ServiceType(Base):
    __tablename__ = "service_types"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Float, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    required_team_size = Column(Integer, default=1, nullable=False)


class TeamMember(Base):
    """Staff member eligible for assignments and location tracking"""

    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    employee_id = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    performance_rating = Column(Float, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    company = relationship("Company", back_populates="team_members")
    profile = relationship("Profile", back_populates="team_member")


class Job(Base):
    """One scheduled service visit for a customer"""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    service_type_id = Column(String(36), ForeignKey("service_types.id"), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    service_address = Column(Text, nullable=False)

    # Scheduling
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(String(10), nullable=False)  # HH:MM format
    estimated_duration = Column(Integer, nullable=True)  # minutes

    # Status workflow: scheduled → in-progress → completed
    # cancelled and issue are side exits from scheduled / in-progress
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    priority = Column(String(20), default="medium", nullable=False)
    special_instructions = Column(Text, nullable=True)

    # Pricing
    estimated_price = Column(Float, nullable=True)
    final_price = Column(Float, nullable=True)

    # Audit trail
    created_by = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    assigned_manager = Column(String(36), ForeignKey("profiles.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer")
    service_type = relationship("ServiceType")
    created_by_profile = relationship("Profile", foreign_keys=[created_by])
    assigned_manager_profile = relationship("Profile", foreign_keys=[assigned_manager])
    assignments = relationship(
        "JobAssignment", back_populates="job", cascade="all, delete-orphan"
    )
    updates = relationship("JobUpdate", back_populates="job", cascade="all, delete-orphan")
    photos = relationship("JobPhoto", back_populates="job", cascade="all, delete-orphan")
    geofence = relationship(
        "JobGeofence", back_populates="job", uselist=False, cascade="all, delete-orphan"
    )


class JobAssignment(Base):
    __tablename__ = "job_assignments"
    __table_args__ = (
        UniqueConstraint("job_id", "team_member_id", name="uq_job_assignments_job_member"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    team_member_id = Column(String(36), ForeignKey("team_members.id"), nullable=False, index=True)
    role = Column(String(20), default="cleaner", nullable=False)  # cleaner, lead, supervisor
    assigned_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    assigned_at = Column(DateTime, default=utcnow, nullable=False)

    job = relationship("Job", back_populates="assignments")
    team_member = relationship("TeamMember")
    assigned_by_profile = relationship("Profile", foreign_keys=[assigned_by])


class JobUpdate(Base):
    """Immutable timeline entry for a job"""

    __tablename__ = "job_updates"

    id = Column(String(36), primary_key=True, default=generate_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    updated_by = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    status = Column(String(20), nullable=True)
    notes = Column(Text, nullable=False)
    location = Column(String(100), nullable=True)  # WKT: POINT(lng lat)
    photos = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    job = relationship("Job", back_populates="updates")
    author = relationship("Profile")


class JobPhoto(Base):
    """Before/after verification photo stored in object storage"""

    __tablename__ = "job_photos"

    id = Column(String(36), primary_key=True, default=generate_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    uploaded_by = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    storage_key = Column(String(500), nullable=False)
    type = Column(String(20), nullable=False)  # before, after, issue, other
    caption = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    job = relationship("Job", back_populates="photos")


class JobGeofence(Base):
    """Circular area around a job site; at most one per job"""

    __tablename__ = "job_geofences"

    id = Column(String(36), primary_key=True, default=generate_id)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, unique=True)
    radius = Column(Float, nullable=False)  # meters
    notification_on_enter = Column(Boolean, default=True, nullable=False)
    notification_on_exit = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    job = relationship("Job", back_populates="geofence")


class TeamLocation(Base):
    """Append-only location sample for a team member"""

    __tablename__ = "team_locations"

    id = Column(String(36), primary_key=True, default=generate_id)
    team_member_id = Column(String(36), ForeignKey("team_members.id"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)  # meters
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(30), default="info", nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    related_job_id = Column(String(36), ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True)
    related_review_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
