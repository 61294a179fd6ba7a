import httpx
import pytest
from ldglob import GlobHandler, GlobTraversalError, HttpxTransport, RemoteNamespace
from tests.helpers.asserts import parse_turtle


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def bridge(memory):
    """Serve a MemoryTransport through httpx."""

    async def handler(request):
        response = await memory.send(request.method, str(request.url), dict(request.headers))
        return httpx.Response(response.status, headers=response.headers, content=response.body)

    return handler


@pytest.mark.asyncio
async def test_send_builds_a_response():
    seen = {}

    def handler(request):
        seen["accept"] = request.headers["accept"]
        return httpx.Response(
            200,
            headers=[("Content-Type", "text/turtle; charset=utf-8"), ("Link", "<a>; rel=x"), ("Link", "<b>; rel=y")],
            content=b"<#a> <#b> <#c> .",
        )

    async with mock_client(handler) as client:
        transport = HttpxTransport(client)
        response = await transport.send("GET", "https://pod.example/a.ttl", {"Accept": "text/turtle"})

    assert seen["accept"] == "text/turtle"
    assert response.status == 200
    assert response.content_type == "text/turtle"
    assert response.header("link") == "<a>; rel=x, <b>; rel=y"
    assert response.text() == "<#a> <#b> <#c> ."
    assert response.url == "https://pod.example/a.ttl"


@pytest.mark.asyncio
async def test_borrowed_client_stays_open():
    async with mock_client(lambda request: httpx.Response(204)) as client:
        async with HttpxTransport(client) as transport:
            await transport.send("HEAD", "https://pod.example/")
        assert not client.is_closed


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    transport = HttpxTransport()
    await transport.aclose()
    assert transport._client.is_closed


def test_invalid_timeout():
    with pytest.raises(ValueError):
        HttpxTransport(timeout=0)


@pytest.mark.asyncio
async def test_connection_errors_surface_as_traversal_errors():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with mock_client(handler) as client:
        ns = RemoteNamespace(HttpxTransport(client), "https://pod.example/")
        with pytest.raises(GlobTraversalError) as excinfo:
            await ns.probe("/data")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_namespace_over_http(mem):
    mem.put("/data/a.ttl", "<#a> <#p> <#b> .")
    mem.alias("/link", "/data")
    async with mock_client(bridge(mem)) as client:
        ns = RemoteNamespace(HttpxTransport(client), "https://pod.example/")
        assert await ns.list("/data") == ["a.ttl"]
        assert (await ns.probe("/link")).canonical == "/data"
        assert not (await ns.probe("/missing")).exists


@pytest.mark.asyncio
async def test_handler_over_http(mem):
    mem.put("/data/a.ttl", "<#a> <#p> <#b> .")
    mem.put("/data/deeper/b.ttl", "<#b> <#p> <#c> .")
    async with mock_client(bridge(mem)) as client:
        handler = GlobHandler(HttpxTransport(client))
        response = await handler.handle("https://pod.example/data/**/*.ttl", {"Accept": "text/turtle"})
    assert response.status == 200
    assert len(parse_turtle(response.text(), "https://pod.example/data/")) == 2
