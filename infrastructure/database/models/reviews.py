from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from infrastructure.database.database import Base
from schemas.enumeration import OMIT

REVIEW_OUTCOMES = ("approved", "rejected", "deprecated")


def outcome_method_name(value, column, record_type):
    if value == "deprecated":
        return OMIT
    return f"is_{column}_{value}"


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    # is_outcome_approved(), is_outcome_rejected()
    outcome = Column(
        Enum(*REVIEW_OUTCOMES, name="review_outcome"),
        nullable=True,
        info={"extra": {"handles": outcome_method_name}},
    )
    # Plain string column declared as enumerated through ``info``.
    channel = Column(
        "review_channel",
        String(32),
        nullable=True,
        info={
            "data_type": "enum",
            "extra": {"list": ["email", "chat"], "handles": {"via_email": "email", "via_chat": "chat"}},
        },
    )
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    ticket = relationship("Ticket", back_populates="reviews")
