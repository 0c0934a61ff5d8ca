"""
Lambdabased Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LambdaBasedSettings(BaseSettings):
    """
    Lambdabased configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LB_",  # All lambdabased env vars must start with LB_
    )

    # AWS Configuration
    aws_profile: str | None = Field(
        default=None,
        description="Shared config profile used for Lambda calls (env: LB_AWS_PROFILE)",
    )

    aws_region: str | None = Field(
        default=None,
        description="AWS region of the invoked functions (env: LB_AWS_REGION)",
    )

    assume_role_arn: str | None = Field(
        default=None,
        description="Role assumed through STS before invoking (env: LB_ASSUME_ROLE_ARN)",
    )

    role_session_name: str = Field(
        default="lambdabased",
        description="Session name used when assuming a role (env: LB_ROLE_SESSION_NAME)",
    )

    # Pulumi Configuration
    pulumi_config_passphrase: str = Field(
        default="lambdabased",
        description="Pulumi passphrase for state encryption (env: LB_PULUMI_CONFIG_PASSPHRASE or PULUMI_CONFIG_PASSPHRASE)",
        validation_alias=AliasChoices(
            "LB_PULUMI_CONFIG_PASSPHRASE", "PULUMI_CONFIG_PASSPHRASE"
        ),
    )

    pulumi_state_dir: Path = Field(
        default=Path(".lambdabased/state"),
        description="Directory of the local Pulumi state backend (env: LB_PULUMI_STATE_DIR)",
    )

    stack_name: str = Field(
        default="dev",
        description="Pulumi stack name (env: LB_STACK_NAME)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: LB_LOG_LEVEL)",
    )


# Global settings instance
_settings: LambdaBasedSettings | None = None


def get_settings() -> LambdaBasedSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        LambdaBasedSettings instance
    """
    global _settings
    if _settings is None:
        _settings = LambdaBasedSettings()
    return _settings


def reload_settings() -> LambdaBasedSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh LambdaBasedSettings instance
    """
    global _settings
    _settings = LambdaBasedSettings()
    return _settings
