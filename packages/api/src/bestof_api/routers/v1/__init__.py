from fastapi import APIRouter

from bestof_api.routers.v1 import (
    admin,
    admin_contact,
    admin_stats,
    contact,
    favorites,
    newsletter,
    search,
)

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(search.router)
v1_router.include_router(contact.router)
v1_router.include_router(newsletter.router)
v1_router.include_router(favorites.router)
# Fixed admin paths must be registered before the /admin/{category}/{id} routes
v1_router.include_router(admin_stats.router)
v1_router.include_router(admin_contact.router)
v1_router.include_router(admin.router)
