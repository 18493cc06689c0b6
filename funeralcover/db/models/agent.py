from sqlalchemy import Column, Integer, String

from funeralcover.db.base import Base


class Agent(Base):
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
