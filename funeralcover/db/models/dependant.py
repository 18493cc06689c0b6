from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from funeralcover.db.base import Base


class Dependant(Base):
    __tablename__ = "dependants"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    dob = Column(Date, nullable=True)

    # Relationships
    member = relationship("Member", backref="dependants")
