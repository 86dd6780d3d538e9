from fastapi import APIRouter

from app.api.discussions import router as discussions_router
from app.api.messages import router as messages_router
from app.api.preferences import router as preferences_router
from app.api.system import router as system_router
from app.api.users import router as users_router

router = APIRouter()

router.include_router(users_router)
router.include_router(messages_router)
router.include_router(preferences_router)
router.include_router(discussions_router)
router.include_router(system_router)


@router.get("/", tags=["root"])
def read_root() -> dict[str, str]:
    return {"message": "Welcome to the Campus Hub API"}
