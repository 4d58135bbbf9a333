"""API routes, mounted under API_PREFIX (default /api)."""

from fastapi import APIRouter

from citylinker.api.routes import admin, auth, business, categories, health, publications, reviews

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(publications.router, prefix="/publications", tags=["publications"])
router.include_router(reviews.router, prefix="/publications", tags=["reviews"])
router.include_router(business.router, prefix="/business", tags=["business"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
