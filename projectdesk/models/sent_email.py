# projectdesk/models/sent_email.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from projectdesk.database import Base


class SentEmail(Base):
    __tablename__ = "sent_emails"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    client_email = Column(String(191), nullable=False)
    shared_link_token = Column(String(191), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    project = relationship("Project", back_populates="sent_emails")

    def __repr__(self):
        return f"<SentEmail(id={self.id}, project_id={self.project_id}, to='{self.client_email}')>"
