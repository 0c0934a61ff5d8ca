"""Tests for AWS session and Lambda client construction."""

from unittest.mock import MagicMock, call, patch

import pytest
from botocore.exceptions import ClientError, ProfileNotFound

from lambdabased.client import AwsProviderConfig, create_lambda_client, create_session
from lambdabased.errors import ConfigurationError
from lambdabased.settings import reload_settings


def test_config_from_settings(monkeypatch):
    monkeypatch.setenv("LB_AWS_PROFILE", "ops")
    monkeypatch.setenv("LB_AWS_REGION", "eu-west-1")
    monkeypatch.setenv("LB_ASSUME_ROLE_ARN", "arn:aws:iam::123456789012:role/deployer")
    settings = reload_settings()

    config = AwsProviderConfig.from_settings(settings)

    assert config.profile == "ops"
    assert config.region == "eu-west-1"
    assert config.assume_role_arn == "arn:aws:iam::123456789012:role/deployer"
    assert config.role_session_name == "lambdabased"


@patch("lambdabased.client.boto3.Session")
def test_session_without_role(mock_session):
    config = AwsProviderConfig(profile="ops", region="us-east-1")

    session = create_session(config)

    mock_session.assert_called_once_with(profile_name="ops", region_name="us-east-1")
    assert session is mock_session.return_value


@patch("lambdabased.client.boto3.Session")
def test_session_assumes_role(mock_session):
    base_session = MagicMock(region_name="us-east-1")
    role_session = MagicMock()
    mock_session.side_effect = [base_session, role_session]
    base_session.client.return_value.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "AKIA",
            "SecretAccessKey": "secret",
            "SessionToken": "token",
        }
    }
    config = AwsProviderConfig(
        region="us-east-1", assume_role_arn="arn:aws:iam::123456789012:role/deployer"
    )

    session = create_session(config)

    assert session is role_session
    base_session.client.assert_called_once_with("sts")
    base_session.client.return_value.assume_role.assert_called_once_with(
        RoleArn="arn:aws:iam::123456789012:role/deployer",
        RoleSessionName="lambdabased",
    )
    assert mock_session.call_args_list[1] == call(
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        aws_session_token="token",
        region_name="us-east-1",
    )


@patch("lambdabased.client.boto3.Session")
def test_unknown_profile_is_configuration_error(mock_session):
    mock_session.side_effect = ProfileNotFound(profile="missing")

    with pytest.raises(ConfigurationError, match="missing"):
        create_session(AwsProviderConfig(profile="missing"))


@patch("lambdabased.client.boto3.Session")
def test_denied_role_is_configuration_error(mock_session):
    base_session = MagicMock(region_name="us-east-1")
    mock_session.return_value = base_session
    base_session.client.return_value.assume_role.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "not allowed"}}, "AssumeRole"
    )

    with pytest.raises(ConfigurationError, match="not allowed"):
        create_session(
            AwsProviderConfig(assume_role_arn="arn:aws:iam::123456789012:role/x")
        )


@patch("lambdabased.client.create_session")
def test_create_lambda_client(mock_create_session):
    config = AwsProviderConfig(region="us-east-1")

    client = create_lambda_client(config)

    mock_create_session.assert_called_once_with(config)
    mock_create_session.return_value.client.assert_called_once_with("lambda")
    assert client is mock_create_session.return_value.client.return_value
