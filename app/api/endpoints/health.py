from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db

router = APIRouter(tags=["ops"])


@router.get("/health", summary="Liveness probe")
async def health():
    return {"success": True, "status": "ok"}


@router.get("/readyz", summary="Readiness probe (DB)")
async def readyz(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Readiness check failed: {}", exc)
        return JSONResponse(status_code=503, content={"success": False, "ready": False})
    return {"success": True, "ready": True}
