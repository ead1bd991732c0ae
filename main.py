import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import CORS_ORIGINS, LOG_LEVEL, PORT
from database import check_connection
from routers import owners, payments, tenants

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("rentledger")

# App instance
app = FastAPI(title="RentLedger API", version="0.1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tenants.router)
app.include_router(owners.router)
app.include_router(payments.router)


@app.get("/health")
def health():
    database = "ok" if check_connection() else "unreachable"
    return {"status": "ok" if database == "ok" else "degraded", "database": database}


# 404 Fallback Middleware
@app.middleware("http")
async def not_found_middleware(request: Request, call_next):
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    # Unmatched routes only; a 404 raised by a handler keeps its detail
    if response.status_code == 404 and request.scope.get("endpoint") is None:
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return response


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=True)
