"""Exchange a local AWS profile plus an MFA code for role-scoped session credentials."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from .errors import AuthenticationError
from .models import SessionCredential

logger = logging.getLogger(__name__)


def load_profile(name: str) -> dict[str, Any]:
    """Return the scoped config (role_arn, mfa_serial, ...) of a named AWS profile."""
    try:
        return botocore.session.Session(profile=name).get_scoped_config()
    except ProfileNotFound as e:
        raise AuthenticationError(f"AWS profile '{name}' not found") from e


class IdentityBroker:
    """Assumes roles through STS using the long-lived identity profile.

    Call ``assume`` once per target role; the returned credentials belong to
    that role only.
    """

    def __init__(
        self,
        identity_profile: str,
        region: str,
        duration_seconds: int = 3600,
        sts_client: Any = None,
        profile_loader: Callable[[str], dict[str, Any]] = load_profile,
    ) -> None:
        self.identity_profile = identity_profile
        self.region = region
        self.duration_seconds = duration_seconds
        self._sts = sts_client
        self._load_profile = profile_loader

    def _client(self) -> Any:
        if self._sts is None:
            try:
                session = boto3.Session(profile_name=self.identity_profile, region_name=self.region)
            except ProfileNotFound as e:
                raise AuthenticationError(f"AWS profile '{self.identity_profile}' not found") from e
            self._sts = session.client("sts")
        return self._sts

    def assume(self, profile: str, token_code: str, session_name: str) -> SessionCredential:
        config = self._load_profile(profile)
        role_arn = config.get("role_arn")
        mfa_serial = config.get("mfa_serial")
        if not role_arn or not mfa_serial:
            raise AuthenticationError(f"AWS profile '{profile}' must define role_arn and mfa_serial")

        logger.info("Assuming role %s as %s", role_arn, session_name)
        try:
            resp = self._client().assume_role(
                RoleArn=role_arn,
                RoleSessionName=session_name,
                SerialNumber=mfa_serial,
                TokenCode=token_code,
                DurationSeconds=self.duration_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise AuthenticationError(f"Could not assume {role_arn}: {e}") from e

        creds = resp["Credentials"]
        return SessionCredential(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expiration=creds.get("Expiration"),
            role_arn=role_arn,
        )
