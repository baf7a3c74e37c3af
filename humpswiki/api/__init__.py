"""API routes."""

from fastapi import APIRouter

from humpswiki.api import auth, health, posts

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(posts.router, tags=["posts"])
router.include_router(health.router, tags=["health"])
