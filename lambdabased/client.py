"""AWS session and Lambda client construction."""

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .settings import LambdaBasedSettings, get_settings

logger = logging.getLogger(__name__)


class AwsProviderConfig(BaseModel):
    """Credentials and region used to reach Lambda.

    Attributes:
        profile: Shared config/credentials profile (default credential chain if None)
        region: AWS region (profile/environment default if None)
        assume_role_arn: Role assumed through STS before invoking
        role_session_name: Session name for the assumed role
    """

    profile: str | None = None
    region: str | None = None
    assume_role_arn: str | None = None
    role_session_name: str = Field(default="lambdabased", min_length=2)

    @classmethod
    def from_settings(
        cls, settings: LambdaBasedSettings | None = None
    ) -> "AwsProviderConfig":
        """Build the provider configuration from lambdabased settings.

        Args:
            settings: Settings to read (global settings if None)

        Returns:
            AwsProviderConfig
        """
        settings = settings or get_settings()
        return cls(
            profile=settings.aws_profile,
            region=settings.aws_region,
            assume_role_arn=settings.assume_role_arn,
            role_session_name=settings.role_session_name,
        )


def create_session(config: AwsProviderConfig) -> boto3.Session:
    """
    Create a boto3 session for the given provider configuration.

    When a role ARN is configured, the returned session carries the
    temporary credentials of the assumed role.

    Args:
        config: Provider configuration

    Returns:
        boto3 Session

    Raises:
        ConfigurationError: If the profile or the role cannot be resolved
    """
    try:
        session = boto3.Session(
            profile_name=config.profile, region_name=config.region
        )
        if not config.assume_role_arn:
            return session

        logger.info(f"Assuming role {config.assume_role_arn}")
        sts = session.client("sts")
        credentials = sts.assume_role(
            RoleArn=config.assume_role_arn,
            RoleSessionName=config.role_session_name,
        )["Credentials"]

        return boto3.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=session.region_name,
        )
    except (BotoCoreError, ClientError) as e:
        raise ConfigurationError(f"Failed to configure AWS session: {e}") from e


def create_lambda_client(config: AwsProviderConfig | None = None) -> Any:
    """
    Create a Lambda client.

    Args:
        config: Provider configuration (built from settings if None)

    Returns:
        boto3 Lambda client
    """
    config = config or AwsProviderConfig.from_settings()
    session = create_session(config)
    try:
        return session.client("lambda")
    except BotoCoreError as e:
        raise ConfigurationError(f"Failed to create Lambda client: {e}") from e
