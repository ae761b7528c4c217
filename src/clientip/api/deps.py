"""Centralized FastAPI dependency type aliases.

Route modules import the ``*Dep`` aliases instead of writing
``Annotated[T, Depends(get_xxx)]`` by hand.  Each alias maps to a single
``get_*`` function and can be overridden in tests via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends, Request

from clientip.core.base import ClientIPResolver


def get_client_ip_resolver(request: Request) -> ClientIPResolver:
    """Return the resolver registered on the app during startup."""
    return request.app.state.client_ip_resolver


def get_client_ip(
    request: Request,
    resolver: Annotated[ClientIPResolver, Depends(get_client_ip_resolver)],
) -> str:
    """Resolve the client IP of *request*; ``""`` when unknown.

    Usable as a FastAPI dependency::

        client_ip: ClientIPDep
    """
    peer_address = request.client.host if request.client else None
    return resolver.resolve(request.headers, peer_address)


ClientIPDep = Annotated[str, Depends(get_client_ip)]
