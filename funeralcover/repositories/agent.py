from sqlalchemy.orm import Session

from funeralcover.db.models.agent import Agent as AgentModel
from funeralcover.errors import NotFoundError


def get_agent_by_id(db: Session, agent_id: int) -> AgentModel | None:
    return db.query(AgentModel).filter(AgentModel.id == agent_id).first()


def get_agent_by_email(db: Session, email: str) -> AgentModel | None:
    return db.query(AgentModel).filter(AgentModel.email == email).first()


def get_all_agents(db: Session) -> list[AgentModel]:
    return db.query(AgentModel).order_by(AgentModel.name).all()


def create_agent(db: Session, name: str, email: str) -> AgentModel:
    """Create a new agent in the database. Pure data access - no business logic."""
    db_agent = AgentModel(name=name, email=email)
    db.add(db_agent)
    db.commit()
    db.refresh(db_agent)
    return db_agent


def delete_agent(db: Session, agent_id: int) -> None:
    agent = get_agent_by_id(db, agent_id)
    if not agent:
        raise NotFoundError("Agent not found")

    db.delete(agent)
    db.commit()
