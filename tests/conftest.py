"""Pytest fixtures for tcmclient tests."""
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from tcmclient import APIConfig, MemorySession, RequestDispatcher


@pytest.fixture
def store():
    """Credential store holding a test token."""
    return MemorySession("test-token")


@pytest.fixture
async def serve():
    """
    Start an in-process backend.

    Usage:
        server = await serve(web.get('/api/x', handler))
    """
    servers = []

    async def _serve(*routes):
        app = web.Application()
        app.add_routes(list(routes))
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield _serve

    for server in servers:
        await server.close()


@pytest.fixture
def api_config():
    """Build an APIConfig pointing at a TestServer."""
    def _config(server, **kwargs):
        return APIConfig(base_url=str(server.make_url('/api')), **kwargs)
    return _config


@pytest.fixture
async def dispatcher_for(store, api_config):
    """Build dispatchers for servers; all are closed after the test."""
    created = []

    def _make(server, **kwargs):
        dispatcher = RequestDispatcher(api_config(server, **kwargs), store)
        created.append(dispatcher)
        return dispatcher

    yield _make

    for dispatcher in created:
        await dispatcher.close()


@pytest.fixture
def sample_file(tmp_path):
    """Small test-case import file."""
    path = tmp_path / "cases.csv"
    path.write_bytes(b"title,steps,expected\nLogin,open app,home shown\n")
    return path
