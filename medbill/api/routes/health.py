from fastapi import APIRouter

from medbill.core.config import settings

router = APIRouter()


@router.get("/")
async def health():
    return {"status": "ok", "message": f"{settings.APP_NAME} running"}
