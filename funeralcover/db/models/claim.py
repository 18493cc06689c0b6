from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from funeralcover.db.base import Base
from funeralcover.db.types import UTCDateTime
from funeralcover.domain.claims import INITIAL_STATUS


class Claim(Base):
    __tablename__ = "claims"

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False, index=True)
    death_cert_path = Column(String, nullable=True)
    affidavit_path = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default=INITIAL_STATUS.value, index=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)
    rejection_reason = Column(String, nullable=True)
    payout_amount = Column(Numeric(12, 2), nullable=True)
    paid_at = Column(UTCDateTime, nullable=True)

    # Relationships
    policy = relationship("Policy", backref="claims")
