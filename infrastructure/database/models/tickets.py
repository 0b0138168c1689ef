from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from infrastructure.database.database import Base

TICKET_STATUSES = ("open", "pending", "closed")
TICKET_PRIORITIES = ("low", "normal", "high", "urgent")


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)

    # is_open(), is_pending(), is_closed()
    status = Column(
        Enum(*TICKET_STATUSES, name="ticket_status"),
        default="open",
        nullable=False,
    )
    # Only the listed names are added; there is no method for "normal".
    priority = Column(
        Enum(*TICKET_PRIORITIES, name="ticket_priority"),
        nullable=True,
        info={
            "extra": {
                "handles": {
                    "is_low_priority": "low",
                    "is_high_priority": "high",
                    "needs_attention": "urgent",
                },
            },
        },
    )
    # Shares labels with ``status``; predicates are switched off to avoid clashes.
    previous_status = Column(
        Enum(*TICKET_STATUSES, name="ticket_previous_status"),
        nullable=True,
        info={"extra": {"handles": 0}},
    )
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    reviews = relationship("Review", back_populates="ticket", cascade="all, delete-orphan")
