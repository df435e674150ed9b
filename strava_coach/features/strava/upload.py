"""
Strava activity upload.

Uploads a GPX document and waits for Strava to turn it into an activity.
Processing is asynchronous on Strava's side, so the upload status is
polled a bounded number of times with a fixed delay.
"""

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from strava_coach.config import settings

from .client import StravaClient, StravaUploadError

logger = logging.getLogger(__name__)


GPX_FILENAME = "route.gpx"
GPX_CONTENT_TYPE = "application/gpx+xml"


class UploadStatus(BaseModel):
    """Strava upload status (POST /uploads and GET /uploads/{id})."""

    model_config = ConfigDict(extra="ignore")

    id: int
    id_str: Optional[str] = None
    external_id: Optional[str] = None
    error: Optional[str] = None
    status: Optional[str] = None
    activity_id: Optional[int] = None


class StravaUploader:
    """
    Upload GPX files through an open StravaClient.

    Usage:
        uploader = StravaUploader(client)
        upload = await uploader.upload_gpx(gpx, "Morning loop")
        done = await uploader.wait_for_upload(upload.id)
        url = uploader.activity_url(done.activity_id)
    """

    def __init__(self, client: StravaClient):
        self.client = client

    async def upload_gpx(
        self,
        gpx: str,
        name: str,
        description: Optional[str] = None,
    ) -> UploadStatus:
        """
        Upload a GPX document as a run.

        Raises:
            StravaUploadError: If Strava rejects the file
        """
        data = {
            "name": name,
            "data_type": "gpx",
            "activity_type": "Run",
        }
        if description:
            data["description"] = description

        files = {"file": (GPX_FILENAME, gpx.encode("utf-8"), GPX_CONTENT_TYPE)}

        response = await self.client.request("POST", "/uploads", data=data, files=files)
        upload = UploadStatus.model_validate(response.json())

        if upload.error:
            raise StravaUploadError(f"Strava upload error: {upload.error}")

        logger.info(f"Uploaded GPX '{name}' as upload {upload.id}")
        return upload

    async def wait_for_upload(
        self,
        upload_id: int,
        max_attempts: Optional[int] = None,
        delay_seconds: Optional[float] = None,
    ) -> UploadStatus:
        """
        Poll an upload until Strava has created the activity.

        Args:
            upload_id: Id returned by upload_gpx
            max_attempts: Status checks before giving up
            delay_seconds: Fixed wait between checks

        Returns:
            Final status with activity_id set

        Raises:
            StravaUploadError: On a processing error or after max_attempts
        """
        if max_attempts is None:
            max_attempts = settings.upload_poll_attempts
        if delay_seconds is None:
            delay_seconds = settings.upload_poll_delay_seconds

        for attempt in range(max_attempts):
            response = await self.client.request("GET", f"/uploads/{upload_id}")
            status = UploadStatus.model_validate(response.json())

            if status.activity_id:
                logger.info(f"Upload {upload_id} ready as activity {status.activity_id}")
                return status

            if status.error:
                raise StravaUploadError(f"Upload processing error: {status.error}")

            logger.debug(f"Upload {upload_id} still processing ({attempt + 1}/{max_attempts})")

            if attempt < max_attempts - 1:
                await asyncio.sleep(delay_seconds)

        raise StravaUploadError(
            "Upload processing timeout - activity may still be processing on Strava"
        )

    @staticmethod
    def activity_url(activity_id: int) -> str:
        """Public Strava page of an activity."""
        return f"{settings.strava_web_url}/activities/{activity_id}"
