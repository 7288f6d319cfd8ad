from fastapi import APIRouter

from textscan.api.v1 import analyze, credentials

router = APIRouter()
router.include_router(analyze.router, tags=["analyze"])
router.include_router(credentials.router, tags=["credentials"])
