# projectdesk/models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from projectdesk.database import Base
import enum


class Role(str, enum.Enum):
    ADMIN = "admin"
    TECHNICIAN = "technician"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(191), nullable=False)
    email = Column(String(191), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    assignments = relationship(
        "ProjectAssignment", back_populates="user", cascade="all, delete-orphan"
    )
    assigned_projects = relationship(
        "Project", secondary="project_assignments", viewonly=True, order_by="Project.id"
    )

    @property
    def role(self) -> Role:
        return Role.ADMIN if self.is_admin else Role.TECHNICIAN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
