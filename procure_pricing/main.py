from fastapi import FastAPI

from procure_pricing.api.routes import api_router
from procure_pricing.api.v1 import v1_router
from procure_pricing.config.settings import settings
from procure_pricing.core.logging_config import setup_logging

setup_logging()

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

app.include_router(api_router)
app.include_router(v1_router)
