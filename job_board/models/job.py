"""Job posting model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id"), nullable=False, index=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)  # denormalized from companies.name
    location: Mapped[str] = mapped_column(String(255), default="")
    type: Mapped[str] = mapped_column(String(50), default="")  # Full-time, Part-time, Contract, ...
    salary: Mapped[str] = mapped_column(String(100), default="")
    description: Mapped[str] = mapped_column(Text, default="")

    # Ordered lists; order is preserved and duplicates are allowed
    requirements: Mapped[list] = mapped_column(JSON, default=list)
    responsibilities: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True)
    views_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )

    company: Mapped["Company"] = relationship(back_populates="jobs")
    applications: Mapped[list["Application"]] = relationship(back_populates="job")

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "company": self.company_name,
            "companyId": str(self.company_id),
            "location": self.location or "",
            "type": self.type or "",
            "salary": self.salary or "",
            "description": self.description or "",
            "requirements": list(self.requirements or []),
            "responsibilities": list(self.responsibilities or []),
            "tags": list(self.tags or []),
            "isActive": self.is_active,
            "isApproved": self.is_approved,
            "viewsCount": self.views_count or 0,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
