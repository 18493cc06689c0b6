from funeralcover.db.models.role import Role
from funeralcover.db.models.user import User
from funeralcover.db.models.member import Member
from funeralcover.db.models.dependant import Dependant
from funeralcover.db.models.policy import Policy
from funeralcover.db.models.payment import Payment
from funeralcover.db.models.claim import Claim
from funeralcover.db.models.agent import Agent

__all__ = ["Role", "User", "Member", "Dependant", "Policy", "Payment", "Claim", "Agent"]
