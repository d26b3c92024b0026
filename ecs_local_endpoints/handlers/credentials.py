"""Эндпоинты учётных данных задачи: /role, /role-arn и /creds.

Запросы проксируются в IAM и STS от имени локальной учётной записи AWS.
"""

from __future__ import annotations

import logging
import platform
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from flask import Flask, Response

from ecs_local_endpoints import __app_name__, __version__
from ecs_local_endpoints.handlers.http import HTTPError, json_response
from ecs_local_endpoints.settings.groups import DEFAULT_SHARED_TOKEN_EXPIRATION_SEC
from ecs_local_endpoints.settings.registry import SettingsRegistry
from ecs_local_endpoints.utils.helpers import parse_duration_seconds, truncate

LOGGER = logging.getLogger(__name__)

TEMPORARY_CREDENTIALS_DURATION_SEC = 3600
ROLE_SESSION_NAME_LENGTH = 64
EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_expiration(moment: datetime) -> str:
    """Время истечения в формате RFC 3339 (UTC)."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(EXPIRATION_FORMAT)


def credential_response(
    access_key_id: str,
    secret_access_key: str,
    token: str,
    expiration: str = "",
    role_arn: str = "",
) -> Dict[str, str]:
    response = {
        "AccessKeyId": access_key_id,
        "SecretAccessKey": secret_access_key,
        "Token": token,
    }
    if expiration:
        response["Expiration"] = expiration
    if role_arn:
        response["RoleArn"] = role_arn
    return response


def shared_token_expiration(raw_value: str, now: Optional[datetime] = None) -> datetime:
    """Момент истечения для временных ключей, у которых провайдер его не сообщил."""

    try:
        seconds = parse_duration_seconds(raw_value)
    except ValueError:
        LOGGER.warning(
            "Could not parse SHARED_TOKEN_EXPIRATION value, defaulting to %d seconds: %s",
            DEFAULT_SHARED_TOKEN_EXPIRATION_SEC,
            raw_value,
        )
        seconds = DEFAULT_SHARED_TOKEN_EXPIRATION_SEC

    if seconds <= 0:
        LOGGER.warning(
            "SHARED_TOKEN_EXPIRATION value must be positive, forcing to %d seconds: %s",
            DEFAULT_SHARED_TOKEN_EXPIRATION_SEC,
            raw_value,
        )
        seconds = DEFAULT_SHARED_TOKEN_EXPIRATION_SEC

    return (now or datetime.now(timezone.utc)) + timedelta(seconds=seconds)


class CredentialService:
    """Выдаёт контейнерам временные учётные данные."""

    def __init__(
        self,
        session: Any,
        iam_client: Any,
        sts_client: Any,
        settings: SettingsRegistry,
    ) -> None:
        self._session = session
        self._iam = iam_client
        self._sts = sts_client
        self._shared_token_expiration = settings.get_value(
            "credentials", "shared_token_expiration", default=""
        )

    @classmethod
    def from_settings(cls, settings: SettingsRegistry) -> "CredentialService":
        """Создаёт клиентов IAM и STS с учётом пользовательских эндпоинтов."""

        # https://github.com/boto/botocore/issues/1841
        boto3.set_stream_logger(name="botocore.credentials", level=logging.ERROR)

        session = boto3.Session()
        client_config = Config(
            user_agent_extra=f"aws-{__app_name__}/{__version__} ({platform.system().lower()})"
        )
        iam_endpoint = settings.get_value("credentials", "iam_endpoint") or None
        sts_endpoint = settings.get_value("credentials", "sts_endpoint") or None
        if iam_endpoint:
            LOGGER.info("Using custom IAM endpoint %s", iam_endpoint)
        if sts_endpoint:
            LOGGER.info("Using custom STS endpoint %s", sts_endpoint)

        iam_client = session.client("iam", endpoint_url=iam_endpoint, config=client_config)
        sts_client = session.client("sts", endpoint_url=sts_endpoint, config=client_config)
        return cls(session, iam_client, sts_client, settings)

    # ------------------------------------------------------------------- routes
    def setup_routes(self, app: Flask) -> None:
        for rule in ("/role/<role_name>", "/role/<role_name>/"):
            app.add_url_rule(rule, endpoint="role_credentials", view_func=self._role_handler)
        for rule in ("/role-arn/<path:role_arn>",):
            app.add_url_rule(rule, endpoint="role_arn_credentials", view_func=self._role_arn_handler)
        for rule in ("/creds", "/creds/"):
            app.add_url_rule(
                rule, endpoint="temporary_credentials", view_func=self._temporary_handler
            )

    def _role_handler(self, role_name: str) -> Response:
        LOGGER.debug("Received role credentials request")
        return json_response(self.get_role_credentials(role_name))

    def _role_arn_handler(self, role_arn: str) -> Response:
        LOGGER.debug("Received role credentials request using ARN")
        role_arn = role_arn.rstrip("/")
        role_name = role_arn.rsplit("/", 1)[-1] if "/" in role_arn else ""
        if not role_name:
            raise HTTPError(
                400, f"Invalid URL path /role-arn/{role_arn}; expected '/role-arn/<IAM Role ARN>'"
            )
        return json_response(self.get_role_credentials_from_arn(role_arn, role_name))

    def _temporary_handler(self) -> Response:
        LOGGER.debug("Received temporary local credentials request")
        return json_response(self.get_temporary_credentials())

    # -------------------------------------------------------------- operations
    def get_role_credentials(self, role_name: str) -> Dict[str, str]:
        """Учётные данные роли по её имени."""

        LOGGER.debug("Requesting credentials for %s", role_name)
        output = self._iam.get_role(RoleName=role_name)
        return self.get_role_credentials_from_arn(output["Role"]["Arn"], role_name)

    def get_role_credentials_from_arn(self, role_arn: str, role_name: str) -> Dict[str, str]:
        """Учётные данные роли по её ARN через sts:AssumeRole."""

        LOGGER.debug("Requesting credentials for role with ARN %s", role_arn)
        output = self._sts.assume_role(
            RoleArn=role_arn,
            DurationSeconds=TEMPORARY_CREDENTIALS_DURATION_SEC,
            RoleSessionName=truncate(f"ecs-local-{role_name}", ROLE_SESSION_NAME_LENGTH),
        )
        creds = output["Credentials"]
        return credential_response(
            creds["AccessKeyId"],
            creds["SecretAccessKey"],
            creds["SessionToken"],
            format_expiration(creds["Expiration"]),
            role_arn,
        )

    def get_temporary_credentials(self) -> Dict[str, str]:
        """Временные учётные данные для локальной учётной записи.

        Временные ключи не могут вызывать GetSessionToken, поэтому если
        текущая сессия уже построена на них, они отдаются как есть.
        """

        current = self._session.get_credentials() if self._session is not None else None
        frozen = current.get_frozen_credentials() if current is not None else None
        if frozen is not None and frozen.token:
            LOGGER.debug("Current session contains temporary credentials")
            expiry = getattr(current, "_expiry_time", None)
            if expiry is None:
                # SDK клиентам нужно время истечения, если есть токен
                expiry = shared_token_expiration(self._shared_token_expiration)
            return credential_response(
                frozen.access_key,
                frozen.secret_key,
                frozen.token,
                format_expiration(expiry),
            )

        output = self._sts.get_session_token(DurationSeconds=TEMPORARY_CREDENTIALS_DURATION_SEC)
        creds = output["Credentials"]
        return credential_response(
            creds["AccessKeyId"],
            creds["SecretAccessKey"],
            creds["SessionToken"],
            format_expiration(creds["Expiration"]),
        )
