"""
dependencies.py — FastAPI dependency injection

Provides get_gorest_client() for use with Depends() in route handlers. The
client itself is created once in the lifespan hook of api/main.py and kept
on app.state; route handlers never build their own.

Usage in a route handler:
    from fastapi import Depends
    from api.dependencies import get_gorest_client
    from clients.gorest import GoRestClient

    @router.get("/example")
    async def example(client: GoRestClient = Depends(get_gorest_client)):
        users, total = await client.list_users()
        ...

Tests swap in a client wired to httpx.MockTransport through
app.dependency_overrides[get_gorest_client].
"""

from fastapi import Request

from clients.gorest import GoRestClient


def get_gorest_client(request: Request) -> GoRestClient:
    """Return the application-wide GoRest client.

    Raises:
        RuntimeError: if called before the lifespan hook created the client.
    """
    client = getattr(request.app.state, "gorest_client", None)
    if client is None:
        raise RuntimeError("GoRest client is not initialised; is the app lifespan running?")
    return client
