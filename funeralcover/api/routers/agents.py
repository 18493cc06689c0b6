from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_db, require_roles
from funeralcover.db.models.user import User
import funeralcover.repositories.agent as agent_repo
from funeralcover.schemas.agent import Agent, AgentCreate
from funeralcover.services import agent as agent_service

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("", response_model=list[Agent])
def get_all_agents(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_active_user),
):
    return [Agent.model_validate(agent) for agent in agent_repo.get_all_agents(db)]


@router.post("", response_model=Agent, status_code=status.HTTP_201_CREATED)
def create_new_agent(
    agent_data: AgentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    """Create an agent. Only admin users can create agents."""
    agent = agent_service.create_agent(db, name=agent_data.name, email=agent_data.email)
    return Agent.model_validate(agent)


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent_by_id(
    agent_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    """Delete an agent. Only admin users can delete agents."""
    agent_service.delete_agent(db, agent_id)
