from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from quickbill.core.config import settings
from quickbill.core.kafka import kafka_producer
from quickbill.core.logging import setup_logging
from quickbill.core.metrics import DOMAIN_ERRORS_TOTAL
from quickbill.exceptions import InvalidInput, InvalidTransition
from quickbill.middleware.metrics import MetricsMiddleware
from quickbill.routers import metrics as metrics_router
from quickbill.routers import orders as orders_router
from quickbill.routers import products as products_router
from quickbill.routers import profile as profile_router
from quickbill.routers import reports as reports_router
from quickbill.routers import subscriptions as subscriptions_router


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await kafka_producer.start()
    except Exception as e:
        logger.warning("Kafka producer not started: {error}", error=str(e))
    yield
    await kafka_producer.stop()


app = FastAPI(
    title="QuickBill",
    version="0.1.0",
    swagger_ui_parameters={"persistAuthorization": True},
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.warning(
        "Rejected invalid pricing input on {path}: {error}",
        path=request.url.path,
        error=str(exc),
    )
    DOMAIN_ERRORS_TOTAL.labels(service=settings.SERVICE_NAME, error="invalid_input").inc()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    logger.warning(
        "Rejected order status change on {path}: {error}",
        path=request.url.path,
        error=str(exc),
    )
    DOMAIN_ERRORS_TOTAL.labels(service=settings.SERVICE_NAME, error="invalid_transition").inc()
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "current": getattr(exc.current, "value", exc.current),
            "requested": getattr(exc.requested, "value", exc.requested),
        },
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(products_router.router)
app.include_router(orders_router.router)
app.include_router(reports_router.router)
app.include_router(subscriptions_router.router)
app.include_router(profile_router.router)
app.include_router(metrics_router.router)


if __name__ == "__main__":
    uvicorn.run("quickbill.main:app", host="0.0.0.0", port=8000, reload=True)
