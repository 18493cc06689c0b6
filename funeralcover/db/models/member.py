from sqlalchemy import Column, Integer, String

from funeralcover.db.base import Base


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    id_number = Column(String(32), unique=True, nullable=False, index=True)
    address = Column(String, nullable=True)
    email = Column(String(320), nullable=True)
