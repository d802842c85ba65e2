import os

from pydantic import BaseModel, Field

from .errors import MissingSettingError

TABLE_NAME_ENV = "DYNAMODB_TABLE_NAME"
PRIMARY_KEY_NAME_ENV = "DYNAMODB_PRIMARY_KEY_NAME"
PROFILE_ENV = "AWS_PROFILE"
STRICT_ENV = "DYNAMODB_SCAN_STRICT"

TRUTHY = {"1", "true", "yes", "on"}


class ScanConfig(BaseModel):
    """Which table to scan, which attribute to export and where to write it.

    ``output_file`` starts empty and is assigned by the caller before the
    pipeline runs.
    """

    table_name: str = Field(min_length=1)
    primary_key_name: str = Field(min_length=1)
    output_file: str = ""
    strict: bool = False

    @classmethod
    def new(cls, table_name: str, primary_key_name: str) -> "ScanConfig":
        return cls(table_name=table_name, primary_key_name=primary_key_name)


class ConnectionProfile(BaseModel):
    profile_name: str = Field(min_length=1)

    @classmethod
    def new(cls, profile_name: str) -> "ConnectionProfile":
        return cls(profile_name=profile_name)


def _require(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise MissingSettingError(name)
    return value


def resolve_scan_config() -> ScanConfig:
    """Build the scan configuration from the environment.

    Raises MissingSettingError when DYNAMODB_TABLE_NAME or
    DYNAMODB_PRIMARY_KEY_NAME is unset or empty. The values themselves are
    not checked against DynamoDB naming rules; a bad name is rejected by the
    store when the scan is sent.
    """
    table_name = _require(TABLE_NAME_ENV)
    primary_key_name = _require(PRIMARY_KEY_NAME_ENV)
    strict = os.environ.get(STRICT_ENV, "").strip().lower() in TRUTHY
    return ScanConfig(
        table_name=table_name, primary_key_name=primary_key_name, strict=strict
    )


def resolve_connection_profile() -> ConnectionProfile:
    return ConnectionProfile(profile_name=_require(PROFILE_ENV))
