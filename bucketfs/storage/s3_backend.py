"""AWS S3 (and S3-compatible) object backend built on boto3."""

from __future__ import annotations

import logging
from typing import List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)

from bucketfs.core.errors import BackendError, ErrorKind, classify_error
from bucketfs.storage.backend import ObjectBackend, ObjectData, ObjectInfo, ObjectListing

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}
ACCESS_DENIED_CODES = {
    "403",
    "AccessDenied",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
}
TIMEOUT_CODES = {"RequestTimeout", "RequestTimeoutException"}
UNAVAILABLE_CODES = {
    "500",
    "503",
    "InternalError",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
    "ThrottlingException",
}


def client_error_kind(exc: ClientError) -> str:
    """Map a botocore ClientError to an ErrorKind using its code and HTTP status."""
    error_code = str(exc.response.get("Error", {}).get("Code", ""))
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

    if error_code in NOT_FOUND_CODES or status == 404:
        return ErrorKind.NOT_FOUND
    if error_code in ACCESS_DENIED_CODES or status == 403:
        return ErrorKind.ACCESS_DENIED
    if error_code in TIMEOUT_CODES or status == 408:
        return ErrorKind.TIMEOUT
    if error_code in UNAVAILABLE_CODES or (status is not None and status >= 500):
        return ErrorKind.UNAVAILABLE
    return ErrorKind.UNKNOWN


def exception_kind(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return client_error_kind(exc)
    if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, EndpointConnectionError):
        return ErrorKind.UNAVAILABLE
    if isinstance(exc, (NoCredentialsError, PartialCredentialsError)):
        return ErrorKind.ACCESS_DENIED
    return classify_error(exc)


class S3Backend(ObjectBackend):
    """Object backend for AWS S3 and S3-compatible services (MinIO, R2, LocalStack)."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        session_token: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        force_path_style: bool = False,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
        max_attempts: int = 3,
        client=None,
    ):
        """
        Initialize S3 backend.

        Args:
            bucket_name: Bucket holding every object this backend addresses
            region: AWS region (e.g., "us-east-1")
            access_key_id: Access key; omit to use the ambient credential chain
            secret_access_key: Secret key; ignored unless access_key_id is set
            session_token: Session token for temporary credentials
            endpoint_url: Custom endpoint for S3-compatible services
            force_path_style: Use path-style instead of virtual-host addressing
            connect_timeout: Seconds to wait for a connection
            read_timeout: Seconds to wait for a response
            max_attempts: Total attempts botocore makes per request
            client: Pre-built boto3 S3 client, used instead of building one
        """
        self.bucket_name = bucket_name
        self.region = region

        if client is not None:
            self.s3_client = client
            return

        client_kwargs = {
            "region_name": region,
            "config": BotoConfig(
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": max_attempts, "mode": "standard"},
                s3={"addressing_style": "path" if force_path_style else "auto"},
            ),
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        # Partial credentials defer to the ambient chain
        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key
            if session_token:
                client_kwargs["aws_session_token"] = session_token

        self.s3_client = boto3.client("s3", **client_kwargs)

    def _backend_error(self, exc: Exception, message: str, key: str) -> BackendError:
        kind = exception_kind(exc)
        logger.debug(f"[S3Backend] {message} (kind={kind}): {exc}")
        return BackendError(f"{message}: {exc}", kind=kind, path=key)

    @staticmethod
    def _info(key: str, response: dict) -> ObjectInfo:
        return ObjectInfo(
            key=key,
            size=response.get("ContentLength"),
            last_modified=response.get("LastModified"),
            etag=response.get("ETag"),
        )

    def get_object(self, key: str) -> ObjectData:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            body = response.get("Body")
            content = body.read() if body is not None else b""
        except (ClientError, BotoCoreError) as exc:
            raise self._backend_error(exc, f"Failed to get object {key}", key) from exc
        return ObjectData(info=self._info(key, response), body=content or b"")

    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        try:
            response = self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._backend_error(exc, f"Failed to put object {key}", key) from exc
        return response.get("ETag") or ""

    def delete_object(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._backend_error(exc, f"Failed to delete object {key}", key) from exc

    def head_object(self, key: str) -> ObjectInfo:
        try:
            response = self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._backend_error(exc, f"Failed to head object {key}", key) from exc
        return self._info(key, response)

    def list_objects(self, prefix: str, delimiter: Optional[str] = None) -> ObjectListing:
        params = {"Bucket": self.bucket_name, "Prefix": prefix}
        if delimiter:
            params["Delimiter"] = delimiter

        objects: List[ObjectInfo] = []
        common_prefixes: List[str] = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for obj in page.get("Contents", []):
                    objects.append(
                        ObjectInfo(
                            key=obj["Key"],
                            size=obj.get("Size"),
                            last_modified=obj.get("LastModified"),
                            etag=obj.get("ETag"),
                        )
                    )
                for common in page.get("CommonPrefixes", []):
                    if common.get("Prefix"):
                        common_prefixes.append(common["Prefix"])
        except (ClientError, BotoCoreError) as exc:
            raise self._backend_error(exc, f"Failed to list objects under {prefix!r}", prefix) from exc
        return ObjectListing(objects=objects, common_prefixes=common_prefixes)
