import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.endpoints import auth as auth_api
from app.api.endpoints import users as users_api
from app.api.endpoints import categories as categories_api
from app.api.endpoints import products as products_api
from app.api.endpoints import clients as clients_api
from app.api.endpoints import orders as orders_api
from app.api.endpoints import user_products as user_products_api
from app.api.endpoints import api_settings as api_settings_api
from app.core.exceptions import ProvisioningError
from app.core.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Reseller Provisioning API", version="0.1.0")

@app.exception_handler(ProvisioningError)
async def provisioning_error_handler(request: Request, exc: ProvisioningError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} refused ({exc.status_code}): {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})

# Include API routers
app.include_router(auth_api.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users_api.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(categories_api.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(products_api.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(clients_api.router, prefix="/api/v1/clients", tags=["Clients"])
app.include_router(orders_api.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(user_products_api.router, prefix="/api/v1/user-products", tags=["User Products"])
app.include_router(api_settings_api.router, prefix="/api/v1/api-settings", tags=["API Settings"])

@app.get("/ping", tags=["Health Check"])
async def ping():
    return {"message": "pong"}
