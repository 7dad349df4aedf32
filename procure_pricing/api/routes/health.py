from fastapi import APIRouter

from procure_pricing.config.settings import settings

router = APIRouter()


@router.get("/")
async def health():
    return {"status": "ok", "message": f"{settings.APP_NAME} running", "taxRegime": settings.TAX_REGIME}
