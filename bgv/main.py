from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from bgv.api.routes import router
from bgv.api.admin_routes import router as admin_router
from bgv.core.navigation import NavigationError
from bgv.core.status_codes import REGISTRY_VERSION
from bgv.core.verifier import InvalidVerificationRequest
from bgv.observability.logging import log
from bgv.providers.client import ProviderError
from bgv.settings import settings
from bgv.utils.lock import VerificationInFlight

app = FastAPI(title="BGV Verification API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(admin_router)


@app.get("/health")
def health():
    return {"status": "ok", "registryVersion": REGISTRY_VERSION}


# Menu keys come from the same tree the client rendered; a mismatch means a
# stale or broken client build.
@app.exception_handler(NavigationError)
async def navigation_error_handler(request: Request, exc: NavigationError):
    log(event="navigation_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidVerificationRequest)
async def invalid_request_handler(request: Request, exc: InvalidVerificationRequest):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(VerificationInFlight)
async def inflight_handler(request: Request, exc: VerificationInFlight):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "providerStatus": exc.status_code})


log(event="boot", defaultProvider=settings.DEFAULT_PROVIDER, verifyMode=settings.VERIFY_MODE,
    registryVersion=REGISTRY_VERSION)
