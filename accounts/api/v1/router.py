from fastapi import APIRouter, Depends

from accounts.api.deps import get_authenticated_user
from accounts.api.routers import auth, users

# Every request carrying a bearer token refreshes it, whatever the route
api_router = APIRouter(dependencies=[Depends(get_authenticated_user)])

api_router.include_router(auth.router)
api_router.include_router(users.router)
