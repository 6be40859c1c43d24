"""
CareCheck API

Evidence linking and normative validation for care-funding applications.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from carecheck import __version__
from carecheck.advisory import OpenAIAdvisoryService, build_reference_text
from carecheck.cache import ContextCache
from carecheck.config import Settings, configure_logging
from carecheck.engine import (
    CriterionEvaluator,
    NormativeCheckEngine,
    VersionManager,
    create_default_registry,
)
from carecheck.exceptions import (
    CareCheckError,
    FrameworkNotFoundError,
    FrameworkValidationError,
)
from carecheck.packs import FrameworkPackLoader
from carecheck.store import InMemoryDossierStore, InMemoryFrameworkStore

from api.routes import checks, criteria, evidence, frameworks
from api.schemas.responses import HealthResponse


logger = logging.getLogger("carecheck.api")

# Service state (built on startup)
settings = Settings.from_env()
registry = create_default_registry()
framework_store = InMemoryFrameworkStore()
dossier_store = InMemoryDossierStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load framework packs and wire the routes on startup."""
    configure_logging(settings.log_level)

    loader = FrameworkPackLoader(registry=registry)
    loader.load_directory(settings.packs_dir, framework_store)
    logger.info("Loaded %d framework versions from %s", len(framework_store), settings.packs_dir)

    advisory = None
    if settings.advisory_enabled:
        advisory = OpenAIAdvisoryService(
            model=settings.advisory_model,
            reference=ContextCache(loader=build_reference_text),
        )
        logger.info("Advisory service enabled (model %s)", settings.advisory_model)

    manager = VersionManager(framework_store, registry)
    frameworks.set_manager(manager)
    checks.set_services(NormativeCheckEngine(registry, settings.rule_workers), manager)
    criteria.set_evaluator(CriterionEvaluator(
        dossier_store,
        advisory=advisory,
        advisory_timeout=settings.advisory_timeout,
    ), settings.max_evidence)

    yield

    logger.info("Shutting down")


# Create app
app = FastAPI(
    title="CareCheck API",
    description="""
**Evidence linking and normative validation for long-term care applications.**

CareCheck links claims in meerzorg and herindicatie applications to the
client dossier and checks them against the versioned regulatory framework.

## Quick Start

1. `GET /frameworks/meerzorg/active` - Version a new application should use
2. `POST /checks` - Run the normative checks
3. `POST /evidence/chain` - Build the evidence chain for a claim
4. `POST /criteria/evaluate` - Evaluate the VV8 criteria
    """,
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(CareCheckError)
async def carecheck_error_handler(request: Request, exc: CareCheckError):
    if isinstance(exc, FrameworkNotFoundError):
        status_code = 404
    elif isinstance(exc, FrameworkValidationError):
        status_code = 422
    else:
        status_code = 500
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


# Include routers
app.include_router(frameworks.router)
app.include_router(checks.router)
app.include_router(evidence.router)
app.include_router(criteria.router)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health():
    """Health check endpoint."""
    return {
        "healthy": True,
        "version": __version__,
        "frameworks_loaded": len(framework_store),
        "rules_registered": len(registry),
        "advisory_enabled": settings.advisory_enabled,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
