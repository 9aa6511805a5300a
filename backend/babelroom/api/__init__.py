from datetime import datetime, UTC

from fastapi import APIRouter, Depends

from babelroom.api import rooms
from babelroom.api import translate
from babelroom.api.deps import get_services
from babelroom.services.container import RelayServices

router = APIRouter()


@router.get("/health")
async def health(services: RelayServices = Depends(get_services)):
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        **services.get_health(),
    }


# Include rooms, translate routers
router.include_router(rooms.router)
router.include_router(translate.router)
