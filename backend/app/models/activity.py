from sqlalchemy import Column, Integer, String, Date, DateTime, Float
from sqlalchemy.sql import func
from app.db import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    goal_type = Column(String(20), nullable=False, index=True)  # running, cycling, swimming

    # km for running/cycling, meters for swimming
    distance = Column(Float, nullable=False)

    # Calendar day only; time-of-day does not count toward goals
    date = Column(Date, nullable=False, index=True)
    notes = Column(String, nullable=True)

    # Strava activity id; one stored activity per id
    strava_id = Column(String, nullable=True, unique=True)

    # Source of activity data
    source = Column(
        String(20),
        nullable=False,
        server_default="manual",  # manual entry or strava import
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
