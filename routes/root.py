from fastapi import APIRouter
from datetime import datetime
from config import settings

router = APIRouter(
    tags=["root"]
)


@router.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": settings.APP_DESCRIPTION,
        "endpoints": {
            "github": "/api/github?username={username}&type={user|repos|languages|commits|analytics|heatmap}&days={days}",
            "rate-limit": "/api/github/rate-limit",
            "health": "/health"
        },
        "timestamp": datetime.now().isoformat()
    }
