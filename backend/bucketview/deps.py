from __future__ import annotations

from typing import Callable

from bucketview.models import CredentialRecord
from bucketview.schemas import CredentialConfig
from bucketview.storage import ProviderConfig, S3Gateway, StorageGateway, provider_config, require_credentials

GatewayFactory = Callable[[CredentialRecord, ProviderConfig], StorageGateway]


def gateway_factory() -> GatewayFactory:
    """Overridden in tests to hand out a stubbed gateway."""
    return S3Gateway


def open_gateway(make_gateway: GatewayFactory, provider: str, record: CredentialRecord) -> tuple[StorageGateway, ProviderConfig]:
    require_credentials(record)
    cfg = provider_config(provider, record)
    return make_gateway(record, cfg), cfg


def to_record(config: CredentialConfig | None) -> CredentialRecord:
    if config is None:
        return CredentialRecord()

    def clean(v: str | None) -> str | None:
        v = (v or "").strip()
        return v or None

    return CredentialRecord(
        access_key_id=clean(config.access_key_id),
        secret_access_key=clean(config.secret_access_key),
        bucket_name=clean(config.bucket_name),
        region=clean(config.region),
        account_id=clean(config.account_id),
        public_domain=clean(config.public_domain),
    )
