from fastapi import APIRouter

from funeralcover.api.routers import (
    agents,
    auth,
    claims,
    dependants,
    documentation,
    lapse,
    members,
    notifications,
    payments,
    policies,
    roles,
    subscription,
)

api_router = APIRouter()

api_router.include_router(roles.router)
api_router.include_router(auth.router)
api_router.include_router(subscription.router)
api_router.include_router(members.router)
api_router.include_router(dependants.router)
api_router.include_router(agents.router)
api_router.include_router(policies.router)
api_router.include_router(payments.router)
api_router.include_router(claims.router)
api_router.include_router(lapse.router)
api_router.include_router(notifications.router)
api_router.include_router(documentation.router)
