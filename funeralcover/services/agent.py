from sqlalchemy.orm import Session

import funeralcover.repositories.agent as agent_repo
from funeralcover.db.models.agent import Agent as AgentModel
from funeralcover.errors import DuplicateResourceError, NotFoundError


def create_agent(db: Session, name: str, email: str) -> AgentModel:
    """
    Create an agent.

    Raises:
        DuplicateResourceError: If the email is already used by another agent
    """
    if agent_repo.get_agent_by_email(db, email):
        raise DuplicateResourceError("An agent with this email already exists")
    return agent_repo.create_agent(db, name=name, email=email)


def delete_agent(db: Session, agent_id: int) -> None:
    if not agent_repo.get_agent_by_id(db, agent_id):
        raise NotFoundError("Agent not found")
    agent_repo.delete_agent(db, agent_id)
