from __future__ import annotations

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from bucketview.errors import GatewayError, provider_message
from bucketview.models import CredentialRecord, ListingPayload, ObjectInfo
from bucketview.storage.providers import ProviderConfig, require_credentials


class S3Gateway:
    """
    boto3-backed gateway for any S3-compatible endpoint (AWS S3, Cloudflare R2).

    One instance per request: credentials come from the caller, nothing is cached.
    Retries are disabled so a failure reaches the user on the first attempt.
    """

    def __init__(self, record: CredentialRecord, provider: ProviderConfig, client=None):
        require_credentials(record)
        self.bucket = record.bucket_name or ""
        self.provider = provider
        if client is None:
            cfg = Config(
                region_name=provider.region,
                signature_version="s3v4",
                retries={"total_max_attempts": 1, "mode": "standard"},
            )
            client = boto3.client(
                "s3",
                aws_access_key_id=record.access_key_id,
                aws_secret_access_key=record.secret_access_key,
                endpoint_url=provider.endpoint_url,
                config=cfg,
            )
        self.s3 = client

    def list_objects(self, prefix: str = "", delimiter: str = "/", max_keys: int = 1000) -> ListingPayload:
        try:
            resp = self.s3.list_objects_v2(
                Bucket=self.bucket,
                Prefix=prefix or "",
                Delimiter=delimiter,
                MaxKeys=max_keys,
            )
        except (ClientError, BotoCoreError) as e:
            raise GatewayError(provider_message(e), {"op": "list", "bucket": self.bucket}) from e

        objects = [
            ObjectInfo(key=o["Key"], size=int(o.get("Size") or 0), last_modified=o.get("LastModified"))
            for o in resp.get("Contents") or []
        ]
        prefixes = [p["Prefix"] for p in resp.get("CommonPrefixes") or [] if p.get("Prefix")]
        return ListingPayload(common_prefixes=prefixes, objects=objects)

    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            raise GatewayError(provider_message(e), {"op": "put", "bucket": self.bucket}) from e

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        try:
            return self.s3.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=max(1, int(ttl_seconds)),
            )
        except (ClientError, BotoCoreError) as e:
            raise GatewayError(provider_message(e), {"op": "presign", "bucket": self.bucket}) from e
