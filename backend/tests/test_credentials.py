from __future__ import annotations

import json

from bucketview.models import CredentialRecord
from bucketview.services.credentials import STORAGE_KEY, CredentialStore, is_complete, missing_fields, parse_env_config

R2_TEXT = """
R2_ACCOUNT_ID=abc123
R2_ACCESS_KEY_ID = "AKIA"
R2_SECRET_ACCESS_KEY='s3cr=t'
R2_BUCKET_NAME=media
R2_PUBLIC_URL=cdn.example.com
not a pair
"""


def test_parse_r2_block():
    rec = parse_env_config(R2_TEXT, "r2")
    assert rec == CredentialRecord(
        account_id="abc123",
        access_key_id="AKIA",
        secret_access_key="s3cr=t",
        bucket_name="media",
        public_domain="cdn.example.com",
    )
    assert is_complete(rec, "r2")


def test_parse_aws_accepts_generic_aliases_and_defaults_region():
    rec = parse_env_config("ACCESS_KEY_ID=AK\nSECRET_ACCESS_KEY=SK\nBUCKET_NAME=b", "aws")
    assert rec.access_key_id == "AK"
    assert rec.secret_access_key == "SK"
    assert rec.bucket_name == "b"
    assert rec.region == "us-east-1"


def test_prefixed_aws_names_win_over_generic():
    rec = parse_env_config("AWS_ACCESS_KEY_ID=one\nACCESS_KEY_ID=two\nAWS_REGION=eu-west-1", "aws")
    assert rec.access_key_id == "one"
    assert rec.region == "eu-west-1"


def test_r2_names_are_ignored_for_aws():
    rec = parse_env_config(R2_TEXT, "aws")
    assert missing_fields(rec, "aws") == ["access_key_id", "secret_access_key", "bucket_name"]


def test_empty_text_gives_empty_record():
    assert parse_env_config("", "r2") == CredentialRecord()
    assert missing_fields(CredentialRecord(), "r2") == ["account_id", "access_key_id", "secret_access_key", "bucket_name"]


def test_store_round_trip_and_fingerprint(tmp_path):
    path = tmp_path / "state.json"
    store = CredentialStore(path)
    assert store.load() == ("", "r2")

    empty = store.fingerprint
    store.save(R2_TEXT, "r2")
    saved = store.fingerprint
    assert saved != empty
    assert json.loads(path.read_text())[STORAGE_KEY] == {"text": R2_TEXT, "provider": "r2"}

    provider, rec = CredentialStore(path).record()
    assert provider == "r2"
    assert rec.bucket_name == "media"

    store.clear()
    assert store.fingerprint == empty
    assert store.load() == ("", "r2")


def test_store_keeps_unrelated_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"theme": "dark"}))
    store = CredentialStore(path)
    store.save("x=1", "aws")
    store.clear()
    assert json.loads(path.read_text()) == {"theme": "dark"}


def test_corrupt_store_reads_as_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert CredentialStore(path).load() == ("", "r2")


def test_fingerprint_sees_writes_from_another_store(tmp_path):
    path = tmp_path / "state.json"
    browsing = CredentialStore(path)
    browsing.save(R2_TEXT, "r2")
    seen = browsing.fingerprint

    CredentialStore(path).save(R2_TEXT, "aws")
    assert browsing.fingerprint != seen
    assert browsing.load() == (R2_TEXT, "aws")


def test_fingerprint_stable_when_nothing_changes(tmp_path):
    store = CredentialStore(tmp_path / "state.json")
    store.save(R2_TEXT, "r2")
    before = store.fingerprint
    store.save(R2_TEXT, "r2")
    assert store.fingerprint == before
