"""Client IP API endpoints."""

from fastapi import APIRouter

from .deps import ClientIPDep
from .models import ClientIPResponse, HealthResponse

router = APIRouter(prefix="/api/v1", tags=["ip"])
health_router = APIRouter(tags=["health"])


@router.get("/ip")
async def client_ip(client_ip: ClientIPDep) -> ClientIPResponse:
    """Return the client IP resolved for this request.

    An empty ``client_ip`` with ``known=false`` means no header or peer
    address held an acceptable address; it is not an error.
    """
    return ClientIPResponse(client_ip=client_ip, known=bool(client_ip))


@health_router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse()
