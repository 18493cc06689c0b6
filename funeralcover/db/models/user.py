from sqlalchemy import Boolean, Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from funeralcover.db.base import Base
from funeralcover.db.types import UTCDateTime


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    subscription_expiry = Column(UTCDateTime, nullable=True)
    has_paid = Column(Boolean, nullable=False, default=False)

    # Relationship
    role = relationship("Role", backref="users")
