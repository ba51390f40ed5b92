"""
Courseware Backend — Resource Client Tests
============================================

What:  Tests for ResourceClient against the real app and against canned transports.
How:   httpx ASGITransport routes client calls into the app in-process;
       httpx.MockTransport simulates network failures and odd responses.

What we test:
    ✅ list / get_by_id / create return decoded Course models
    ✅ 404 and 500 responses raise TransportError with status and message
    ✅ Connection failures raise TransportError with the httpx error chained
    ✅ Exactly one request per call (no retries)
"""

import uuid

import httpx
import pytest
import pytest_asyncio

from courseware.client import ResourceClient, course_client
from courseware.exceptions import TransportError
from courseware.middleware.request_id import request_id_var
from courseware.schemas.course import COURSE, CourseResponse


@pytest_asyncio.fixture
async def app_http(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as http:
        yield http


def mock_client(handler) -> ResourceClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return course_client(base_url="http://courses.test", api_prefix="/api", client=http)


class TestClientAgainstApp:

    @pytest.mark.asyncio
    async def test_create_get_list(self, app_http):
        client = course_client(base_url="http://test", api_prefix="/api", client=app_http)

        created = await client.create({"title": "Intro to Systems", "rating": 4.5})
        assert isinstance(created, CourseResponse)
        assert created.id
        assert created.rating == 4.5

        assert await client.get_by_id(created.id) == created
        assert await client.list() == [created]

    @pytest.mark.asyncio
    async def test_create_from_model(self, app_http):
        client = course_client(base_url="http://test", api_prefix="/api", client=app_http)
        payload = COURSE.create_model(course_type="live", last_updated="2024-02-01T08:00:00")

        created = await client.create(payload)

        assert created.course_type == "live"
        assert created.last_updated.isoformat() == "2024-02-01T08:00:00+00:00"

    @pytest.mark.asyncio
    async def test_empty_list_raises_404(self, app_http):
        client = course_client(base_url="http://test", api_prefix="/api", client=app_http)

        with pytest.raises(TransportError) as exc_info:
            await client.list()

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "No courses"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_unknown_id_raises_404(self, app_http):
        client = course_client(base_url="http://test", api_prefix="/api", client=app_http)

        with pytest.raises(TransportError) as exc_info:
            await client.get_by_id(str(uuid.uuid4()))

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Course not found"

    @pytest.mark.asyncio
    async def test_validation_failure_raises_500(self, app_http):
        client = course_client(base_url="http://test", api_prefix="/api", client=app_http)

        with pytest.raises(TransportError) as exc_info:
            await client.create({"rating": "n/a"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["error"] == "validation_error"


class TestClientTransportFailures:

    @pytest.mark.asyncio
    async def test_connection_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = mock_client(handler)

        with pytest.raises(TransportError) as exc_info:
            await client.list()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": "storage_error", "message": "db down"})

        client = mock_client(handler)

        with pytest.raises(TransportError) as exc_info:
            await client.create({"title": "Go"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "db down"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_undecodable_body(self):
        client = mock_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(TransportError, match="decode"):
            await client.get_by_id("abc")

    @pytest.mark.asyncio
    async def test_requests_target_endpoint(self):
        seen = []

        def handler(request):
            seen.append((request.method, str(request.url)))
            return httpx.Response(200, json={"id": "abc", "title": "Go"})

        client = mock_client(handler)
        course = await client.get_by_id("abc")

        assert course.title == "Go"
        assert seen == [("GET", "http://courses.test/api/courses/abc")]

    @pytest.mark.asyncio
    async def test_forwards_request_id(self):
        headers = []

        def handler(request):
            headers.append(request.headers.get("X-Request-ID"))
            return httpx.Response(200, json=[{"id": "abc"}])

        client = mock_client(handler)
        token = request_id_var.set("req-77")
        try:
            await client.list()
        finally:
            request_id_var.reset(token)

        assert headers == ["req-77"]


class TestClientLifecycle:

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        client = course_client(base_url="http://courses.test")
        http = client._get_client()

        async with client:
            pass

        assert http.is_closed

    def test_explicit_zero_timeout_is_kept(self):
        assert course_client(base_url="http://courses.test", timeout=0).timeout == 0

    def test_default_timeout_from_settings(self):
        from courseware.config import settings

        assert course_client(base_url="http://courses.test").timeout == settings.client_timeout

    @pytest.mark.asyncio
    async def test_borrowed_client_is_left_open(self):
        http = httpx.AsyncClient()
        async with course_client(base_url="http://courses.test", client=http):
            pass

        assert not http.is_closed
        await http.aclose()
