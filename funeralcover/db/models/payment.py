from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from funeralcover.db.base import Base
from funeralcover.db.types import UTCDateTime


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    paid_at = Column(UTCDateTime, nullable=False)
    reference = Column(String(255), nullable=True, unique=True)

    # Relationships
    policy = relationship("Policy", backref="payments")
