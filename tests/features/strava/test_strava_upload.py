"""
Tests for GPX upload and status polling.
"""

import httpx
import pytest

from strava_coach.features.strava.client import StravaAuthError, StravaClient, StravaUploadError
from strava_coach.features.strava.upload import StravaUploader


def make_uploader(handler) -> StravaUploader:
    client = StravaClient(
        "test-token",
        base_url="https://strava.test/api/v3",
        transport=httpx.MockTransport(handler),
    )
    return StravaUploader(client)


class TestUploadGpx:

    @pytest.mark.asyncio
    async def test_multipart_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = request.read().decode("utf-8")
            return httpx.Response(201, json={"id": 7, "id_str": "7", "status": "Your activity is still being processed."})

        uploader = make_uploader(handler)
        upload = await uploader.upload_gpx("<gpx/>", "Park Loop", description="Easy")
        await uploader.client.aclose()

        assert upload.id == 7
        assert seen["method"] == "POST"
        assert seen["path"] == "/api/v3/uploads"
        body = seen["body"]
        assert 'name="data_type"' in body and "gpx" in body
        assert 'name="activity_type"' in body and "Run" in body
        assert 'name="description"' in body
        assert 'filename="route.gpx"' in body
        assert "Content-Type: application/gpx+xml" in body
        assert "<gpx/>" in body

    @pytest.mark.asyncio
    async def test_description_optional(self):
        seen = {}

        def handler(request):
            seen["body"] = request.read().decode("utf-8")
            return httpx.Response(201, json={"id": 7})

        uploader = make_uploader(handler)
        await uploader.upload_gpx("<gpx/>", "Park Loop")
        await uploader.client.aclose()

        assert 'name="description"' not in seen["body"]

    @pytest.mark.asyncio
    async def test_rejected(self):
        uploader = make_uploader(
            lambda r: httpx.Response(201, json={"id": 7, "error": "duplicate of activity 99"})
        )
        with pytest.raises(StravaUploadError, match="Strava upload error: duplicate"):
            await uploader.upload_gpx("<gpx/>", "Park Loop")
        await uploader.client.aclose()

    @pytest.mark.asyncio
    async def test_auth_error_propagates(self):
        uploader = make_uploader(lambda r: httpx.Response(401))
        with pytest.raises(StravaAuthError):
            await uploader.upload_gpx("<gpx/>", "Park Loop")
        await uploader.client.aclose()


class TestWaitForUpload:

    @pytest.mark.asyncio
    async def test_ready_after_polling(self):
        responses = iter([
            {"id": 7, "status": "processing"},
            {"id": 7, "status": "processing"},
            {"id": 7, "status": "ready", "activity_id": 1234},
        ])
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json=next(responses))

        uploader = make_uploader(handler)
        status = await uploader.wait_for_upload(7, max_attempts=5, delay_seconds=0)
        await uploader.client.aclose()

        assert status.activity_id == 1234
        assert calls == ["/api/v3/uploads/7"] * 3

    @pytest.mark.asyncio
    async def test_processing_error(self):
        uploader = make_uploader(
            lambda r: httpx.Response(200, json={"id": 7, "error": "corrupt file"})
        )
        with pytest.raises(StravaUploadError, match="Upload processing error: corrupt file"):
            await uploader.wait_for_upload(7, max_attempts=3, delay_seconds=0)
        await uploader.client.aclose()

    @pytest.mark.asyncio
    async def test_timeout(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"id": 7, "status": "processing"})

        uploader = make_uploader(handler)
        with pytest.raises(StravaUploadError, match="timeout"):
            await uploader.wait_for_upload(7, max_attempts=3, delay_seconds=0)
        await uploader.client.aclose()

        assert len(calls) == 3


class TestActivityUrl:

    def test_url(self):
        assert StravaUploader.activity_url(1234) == "https://www.strava.com/activities/1234"
