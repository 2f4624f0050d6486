"""
FastAPI Dependency Injection Module
===================================

Reusable dependencies for the completion routes. Route handlers declare what
they need with the ``XDep`` aliases below and FastAPI resolves them before
the handler runs:

    @router.post("/completion")
    async def completion(request: Request, executor: ExecutorDep, user_id: UserIdDep):
        ...

Tests override any of them through ``app.dependency_overrides``.
"""

from typing import Annotated
from urllib.parse import unquote

from fastapi import Depends, Request

from completion_relay.application.api.models import GeoLocation
from completion_relay.core.config.constants import (
    HEADER_GEO_CITY,
    HEADER_GEO_COUNTRY,
    HEADER_GEO_LATITUDE,
    HEADER_GEO_LONGITUDE,
    HEADER_GEO_REGION,
    HEADER_USER_ID,
)
from completion_relay.core.config.settings import Settings, get_settings
from completion_relay.executors import (
    CompletionExecutor,
    TitleGenerator,
    get_executor,
    get_title_generator,
)

# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_completion_executor(request: Request) -> CompletionExecutor:
    """
    Retrieve the completion executor.

    The lifespan handler stores the executor in ``app.state``. When the
    lifespan did not run (plain TestClient without a context manager) the
    process-wide executor from the factory is used.
    """
    executor = getattr(request.app.state, "executor", None)
    if executor is not None:
        return executor
    return get_executor()


def get_title_generator_dep(request: Request) -> TitleGenerator:
    generator = getattr(request.app.state, "title_generator", None)
    if generator is not None:
        return generator
    return get_title_generator()


def get_user_id(request: Request) -> str | None:
    """
    Authenticated user id, or None for anonymous requests.

    IDENTITY MODEL:
    ---------------
    Authentication is handled by the identity provider in front of this
    service. It forwards the signed-in user's id in the X-User-ID header and
    strips the header for anonymous traffic. Unlike rate limiting, there is
    no IP fallback here: an IP address is not an identity.
    """
    user_id = request.headers.get(HEADER_USER_ID)
    if user_id and user_id.strip():
        return user_id.strip()
    return None


def _header(request: Request, name: str) -> str | None:
    value = request.headers.get(name)
    return unquote(value) if value else None


def get_geo(request: Request) -> GeoLocation:
    """Client location from edge geolocation headers (values are URL-encoded)."""
    return GeoLocation(
        city=_header(request, HEADER_GEO_CITY),
        country=_header(request, HEADER_GEO_COUNTRY),
        country_region=_header(request, HEADER_GEO_REGION),
        latitude=_header(request, HEADER_GEO_LATITUDE),
        longitude=_header(request, HEADER_GEO_LONGITUDE),
    )


# ============================================================================
# TYPE ALIASES FOR CLEANER ROUTE SIGNATURES
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]

ExecutorDep = Annotated[CompletionExecutor, Depends(get_completion_executor)]

# None for anonymous users
UserIdDep = Annotated[str | None, Depends(get_user_id)]

GeoDep = Annotated[GeoLocation, Depends(get_geo)]

TitleGeneratorDep = Annotated[TitleGenerator, Depends(get_title_generator_dep)]
