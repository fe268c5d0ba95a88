from fastapi import APIRouter

from maestro import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "maestro", "version": __version__}
