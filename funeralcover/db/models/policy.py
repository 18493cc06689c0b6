from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from funeralcover.db.base import Base
from funeralcover.db.types import UTCDateTime
from funeralcover.domain.billing import PolicyStatus


class Policy(Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    plan_type = Column(String(100), nullable=False)
    cover_level = Column(Numeric(12, 2), nullable=False)
    premium = Column(Numeric(12, 2), nullable=False)
    start_date = Column(UTCDateTime, nullable=False)
    status = Column(String(20), nullable=False, default=PolicyStatus.ACTIVE.value, index=True)
    last_payment_at = Column(UTCDateTime, nullable=True)
    # Optimistic lock: every UPDATE checks and bumps this counter.
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    member = relationship("Member", backref="policies")

    __mapper_args__ = {"version_id_col": version}
