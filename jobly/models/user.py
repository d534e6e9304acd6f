"""
User model for authentication and job applications.

Users log in with their username; is_admin grants access to the
company/job management endpoints and to every user's account.
"""

from sqlalchemy import Column, String, Text, Boolean
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class User(Base):
    """User account that can apply to jobs."""
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)

    # Authentication credentials
    hashed_password = Column(Text, nullable=False)

    # User profile
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)

    # Admin role for protected endpoints
    is_admin = Column(Boolean, default=False, nullable=False)

    # Relationships
    applications = relationship(
        "Application",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Application.job_id",
    )

    @property
    def jobs(self):
        """Ids of the jobs this user has applied to."""
        return [application.job_id for application in self.applications]

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
