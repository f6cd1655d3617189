# PantryPal API Main Entry Point
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .ai.errors import GenerationError
from .rate_limit import limiter
from .settings import settings
from .routers.ready import router as ready_router
from .routers.profile import router as profile_router
from .routers.sessions import router as sessions_router
from .routers.recommendations import router as recommendations_router
from .routers.feedback import router as feedback_router
from .routers.saved_meals import router as saved_meals_router
from .routers.preferences import router as preferences_router
from .routers.plans import router as plans_router
from .routers.dev import router as dev_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("pantrypal")

app = FastAPI(title="PantryPal API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.error_kind}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error_kind": exc.error_kind,
            "generated": exc.generated,
            "retryable": exc.retryable,
        },
    )


app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(profile_router, prefix="/api", tags=["profile"])
app.include_router(sessions_router, prefix="/api", tags=["sessions"])
app.include_router(recommendations_router, prefix="/api", tags=["recommendations"])
app.include_router(feedback_router, prefix="/api", tags=["feedback"])
app.include_router(saved_meals_router, prefix="/api", tags=["saved-meals"])
app.include_router(preferences_router, prefix="/api", tags=["preferences"])
app.include_router(plans_router, prefix="/api", tags=["plans"])
app.include_router(dev_router, prefix="/api", tags=["dev"])
