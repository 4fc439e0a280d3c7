from __future__ import annotations

from bucketview.storage.base import StorageGateway
from bucketview.storage.providers import PROVIDERS, ProviderConfig, provider_config, require_credentials
from bucketview.storage.s3 import S3Gateway

__all__ = ["PROVIDERS", "ProviderConfig", "S3Gateway", "StorageGateway", "provider_config", "require_credentials"]
