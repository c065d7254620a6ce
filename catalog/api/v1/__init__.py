"""
API v1 Router
"""

from fastapi import APIRouter

from catalog.api.v1 import (
    admin,
    auth,
    calendar,
    collection,
    entities,
    lists,
    notifications,
    reviews,
    system_config,
    tags,
)

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
for entity_router in entities.routers:
    router.include_router(entity_router)
router.include_router(admin.router)
router.include_router(system_config.router)
router.include_router(collection.router)
router.include_router(calendar.router)
router.include_router(reviews.router)
router.include_router(tags.router)
router.include_router(lists.router)
router.include_router(notifications.router)

__all__ = ["router"]
