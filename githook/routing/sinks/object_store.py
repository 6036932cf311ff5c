"""Object store sink — uploads result summaries to S3 as public text objects.

Works with AWS S3 and S3-compatible services (MinIO, LocalStack) through the
optional ``Endpoint`` setting.  Objects are keyed
``{job_label}/{UTC timestamp}-{short uuid}.txt``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from githook.core.errors import SinkError
from githook.models.hook_config import AwsConf
from githook.models.results import ExecutionResult
from githook.routing.sinks._formatting import format_summary

logger = logging.getLogger(__name__)

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class ObjectStoreSink:
    """Stores every result in an S3 bucket and returns its public URL.

    Parameters
    ----------
    client:
        A boto3 S3 client (or anything with the same methods).
    bucket:
        Target bucket name.
    region:
        Bucket region; used for bucket creation and URL building.
    acl:
        Canned ACL applied when the bucket has to be created.
    endpoint:
        Base URL of an S3-compatible service, if not AWS.
    log:
        Logger for bucket and upload lines; defaults to this module's.
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        region: str = "",
        acl: str = "",
        endpoint: str = "",
        log: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._region = region
        self._acl = acl
        self._endpoint = endpoint.rstrip("/")
        self._log = log or logger

    @classmethod
    def from_config(
        cls,
        conf: AwsConf,
        client: Any = None,
        *,
        log: logging.Logger | None = None,
    ) -> ObjectStoreSink:
        """Build the sink from configuration and make sure its bucket exists.

        Raises
        ------
        SinkError
            If the bucket can neither be found nor created.
        """
        if client is None:
            client_kwargs: dict[str, Any] = {
                "service_name": "s3",
                "aws_access_key_id": conf.access,
                "aws_secret_access_key": conf.secret,
                "config": Config(signature_version="s3v4"),
            }
            if conf.region:
                client_kwargs["region_name"] = conf.region
            if conf.endpoint:
                client_kwargs["endpoint_url"] = conf.endpoint
            try:
                client = boto3.client(**client_kwargs)
            except BotoCoreError as exc:
                raise SinkError(f"cannot create S3 client: {exc}") from exc

        sink = cls(
            client,
            conf.bucket,
            region=conf.region,
            acl=conf.acl,
            endpoint=conf.endpoint,
            log=log,
        )
        sink.ensure_bucket()
        return sink

    @property
    def sink_name(self) -> str:
        return "object_store"

    @property
    def notifies(self) -> bool:
        return False

    @property
    def bucket(self) -> str:
        return self._bucket

    def ensure_bucket(self) -> None:
        """Create the bucket unless it already exists."""
        try:
            self._client.head_bucket(Bucket=self._bucket)
            return
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code not in _MISSING_BUCKET_CODES:
                raise SinkError(f"cannot access bucket {self._bucket}: {exc}") from exc
        except BotoCoreError as exc:
            raise SinkError(f"cannot access bucket {self._bucket}: {exc}") from exc

        create_kwargs: dict[str, Any] = {"Bucket": self._bucket}
        if self._acl:
            create_kwargs["ACL"] = self._acl
        if self._region and self._region != "us-east-1":
            create_kwargs["CreateBucketConfiguration"] = {
                "LocationConstraint": self._region
            }

        try:
            self._client.create_bucket(**create_kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise SinkError(f"cannot create bucket {self._bucket}: {exc}") from exc

        self._log.info("Created bucket %s", self._bucket)

    def object_key(self, result: ExecutionResult) -> str:
        stamp = result.started_at.strftime("%Y%m%dT%H%M%SZ")
        return f"{result.job_label}/{stamp}-{uuid.uuid4().hex[:8]}.txt"

    def url_for(self, key: str) -> str:
        """Return the public retrieval URL of *key* in this bucket."""
        if self._endpoint:
            return f"{self._endpoint}/{self._bucket}/{key}"
        if not self._region or self._region == "us-east-1":
            return f"https://{self._bucket}.s3.amazonaws.com/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def log(self, result: ExecutionResult, subject: str, artifact_url: str) -> str:
        """Upload the result summary as a publicly readable text object."""
        key = self.object_key(result)
        body = f"{subject}\n\n{format_summary(result)}".encode("utf-8")

        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ACL="public-read",
                ContentType="text/plain",
            )
        except (ClientError, BotoCoreError) as exc:
            raise SinkError(f"upload of {key} to {self._bucket} failed: {exc}") from exc

        url = self.url_for(key)
        self._log.debug("ObjectStoreSink: stored %s at %s", result.job_label, url)
        return url
