from collections import Counter

import pytest
from ldglob import GlobTraversalError, ProbeKind, RemoteGlob, RemoteNamespace
from ldglob._namespace import is_container
from tests.helpers.asserts import assert_same_matches


@pytest.fixture
def pod(mem):
    mem.put("/data/a.ttl", "<#a> <#p> <#b> .")
    mem.put("/data/b.ttl", "<#b> <#p> <#c> .")
    mem.put("/data/sub/c.ttl", "<#c> <#p> <#d> .")
    mem.mkdir("/data/empty")
    mem.alias("/shortcut", "/data/sub")
    return mem


@pytest.fixture
def ns(pod):
    return RemoteNamespace(pod, "https://pod.example/data/")


@pytest.mark.asyncio
async def test_list_returns_member_names(ns):
    assert sorted(await ns.list("/data")) == ["a.ttl", "b.ttl", "empty", "sub"]


@pytest.mark.asyncio
async def test_list_root(ns):
    assert sorted(await ns.list("/")) == ["data", "shortcut"]


@pytest.mark.asyncio
async def test_list_empty_container(ns):
    assert await ns.list("/data/empty") == []


@pytest.mark.asyncio
async def test_list_missing_container_is_empty(ns, pod):
    assert await ns.list("/nowhere") == []
    assert pod.count("GET", "/nowhere") == 1


@pytest.mark.asyncio
async def test_list_forbidden_container_is_empty(ns, pod):
    pod.fail("/data/sub", 403)
    assert await ns.list("/data/sub") == []


@pytest.mark.asyncio
async def test_list_server_error_raises(ns, pod):
    pod.fail("/data", 500)
    with pytest.raises(GlobTraversalError) as excinfo:
        await ns.list("/data")
    assert excinfo.value.status == 500
    assert excinfo.value.path == "/data"


@pytest.mark.asyncio
async def test_list_of_a_resource_is_empty(ns):
    # "a.ttl/" is not a container
    assert await ns.list("/data/a.ttl") == []


@pytest.mark.asyncio
async def test_list_unreadable_listing_raises(pod):
    pod.put("/junk/index", "not a listing", content_type="text/turtle")

    class Rewriting:
        async def send(self, method, url, headers=None):
            if url.endswith("/junk/"):
                url = url + "index"
            return await pod.send(method, url, headers)

    ns = RemoteNamespace(Rewriting(), "https://pod.example/")
    with pytest.raises(GlobTraversalError, match="unreadable listing"):
        await ns.list("/junk")


@pytest.mark.asyncio
async def test_probe_container(ns):
    result = await ns.probe("/data/sub")
    assert result.kind is ProbeKind.DIRECTORY
    assert result.canonical == "/data/sub"


@pytest.mark.asyncio
async def test_probe_resource(ns):
    result = await ns.probe("/data/a.ttl")
    assert result.kind is ProbeKind.FILE
    assert not result.is_dir


@pytest.mark.asyncio
async def test_probe_missing(ns):
    result = await ns.probe("/data/nope.ttl")
    assert not result.exists


@pytest.mark.asyncio
async def test_probe_alias_reports_target(ns):
    result = await ns.probe("/shortcut")
    assert result.is_dir
    assert result.canonical == "/data/sub"


@pytest.mark.asyncio
async def test_probe_server_error_raises(ns, pod):
    pod.fail("/data/a.ttl", 503)
    with pytest.raises(GlobTraversalError):
        await ns.probe("/data/a.ttl")


@pytest.mark.asyncio
async def test_transport_exception_is_wrapped(pod):
    class Broken:
        async def send(self, method, url, headers=None):
            raise ConnectionResetError("peer went away")

    ns = RemoteNamespace(Broken(), "https://pod.example/")
    with pytest.raises(GlobTraversalError, match="peer went away") as excinfo:
        await ns.list("/data")
    assert isinstance(excinfo.value.__cause__, ConnectionResetError)


@pytest.mark.asyncio
async def test_requests_carry_the_accept_header(pod):
    seen = []

    class Recording:
        async def send(self, method, url, headers=None):
            seen.append(headers["Accept"])
            return await pod.send(method, url, headers)

    ns = RemoteNamespace(Recording(), "https://pod.example/", accept="text/turtle, application/ld+json")
    await ns.probe("/data")
    await ns.list("/data")
    assert seen == ["text/turtle, application/ld+json"] * 2


def test_url_for(ns):
    assert ns.url_for("/data/a.ttl") == "https://pod.example/data/a.ttl"
    assert ns.url_for("/data", container=True) == "https://pod.example/data/"
    assert ns.url_for("/", container=True) == "https://pod.example/"


def test_relative_base_url_is_rejected(pod):
    with pytest.raises(ValueError):
        RemoteNamespace(pod, "/data/")


def test_is_container():
    ldp = "http://www.w3.org/ns/ldp#"
    assert is_container(f'<{ldp}BasicContainer>; rel="type"')
    assert is_container(f'<{ldp}Resource>; rel="type", <{ldp}Container>; rel="type"')
    assert not is_container(f'<{ldp}Resource>; rel="type"')
    assert not is_container(f'<{ldp}BasicContainer>; rel="describedby"')
    assert not is_container(None)


@pytest.mark.asyncio
async def test_glob_over_namespace(ns):
    glob = RemoteGlob("**/*.ttl", ns.list, ns.probe, root="/data")
    assert_same_matches(await glob.expand(), ["a.ttl", "b.ttl", "sub/c.ttl"])


@pytest.mark.asyncio
async def test_glob_issues_each_request_once(pod):
    pod.delay = 0.002
    ns = RemoteNamespace(pod, "https://pod.example/")
    glob = RemoteGlob("**", ns.list, ns.probe)
    await glob.expand()
    repeated = {call: n for call, n in Counter(pod.calls).items() if n > 1}
    assert repeated == {}


@pytest.mark.asyncio
async def test_glob_through_alias_path(ns):
    glob = RemoteGlob("/shortcut/*.ttl", ns.list, ns.probe)
    assert await glob.expand() == ["/shortcut/c.ttl"]
