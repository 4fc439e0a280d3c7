from __future__ import annotations

from dataclasses import dataclass

from bucketview.config import get_settings
from bucketview.errors import MissingCredentialsError, ValidationError
from bucketview.models import CredentialRecord

PROVIDERS = ("r2", "aws")

REQUIRED_FIELDS = {
    "access_key_id": "accessKeyId",
    "secret_access_key": "secretAccessKey",
    "bucket_name": "bucketName",
}


@dataclass(frozen=True)
class ProviderConfig:
    """Client settings for one provider family. R2 pins an endpoint, AWS resolves by region."""

    provider: str
    region: str
    endpoint_url: str | None = None


def require_credentials(record: CredentialRecord) -> None:
    missing = [wire for attr, wire in REQUIRED_FIELDS.items() if not getattr(record, attr)]
    if missing:
        raise MissingCredentialsError(missing)


def provider_config(provider: str, record: CredentialRecord) -> ProviderConfig:
    settings = get_settings()
    if provider == "aws":
        return ProviderConfig(provider="aws", region=record.region or settings.default_aws_region)
    if provider == "r2":
        if not record.account_id:
            raise MissingCredentialsError(["accountId"], message="Missing R2 Account ID")
        endpoint = settings.r2_endpoint_template.format(account_id=record.account_id)
        return ProviderConfig(provider="r2", region="auto", endpoint_url=endpoint)
    raise ValidationError(f"Unsupported provider: {provider!r} (expected one of {', '.join(PROVIDERS)})")
