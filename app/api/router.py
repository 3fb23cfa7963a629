from fastapi import APIRouter

from app.api import actions, commits

api_router = APIRouter(prefix="/api")

api_router.include_router(commits.router)

# Actions are mounted at the root (POST /refresh)
actions_router = actions.router
