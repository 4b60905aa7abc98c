"""Unit tests for aws_assume_role.providers module."""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError

from aws_assume_role.credentials import Credentials
from aws_assume_role.providers import AssumeRoleCredentials, MfaSessionCredentials


SOURCE = Credentials('AKIASOURCE', 'sourceSecret')
EXPIRATION = datetime(2025, 11, 25, 10, 45, 30, tzinfo=timezone.utc)
STS_RESPONSE = {
    'Credentials': {
        'AccessKeyId': 'ASIATEMP',
        'SecretAccessKey': 'tempSecret',
        'SessionToken': 'tempToken',
        'Expiration': EXPIRATION,
    }
}


def mock_sts_session(mock_session):
    mock_sts = Mock()
    mock_session_instance = Mock()
    mock_session_instance.client.return_value = mock_sts
    mock_session.return_value = mock_session_instance
    return mock_sts


class TestAssumeRoleCredentials:
    """Tests for AssumeRoleCredentials."""

    @patch('aws_assume_role.providers.boto3.Session')
    def test_assume_role(self, mock_session):
        mock_sts = mock_sts_session(mock_session)
        mock_sts.assume_role.return_value = STS_RESPONSE

        provider = AssumeRoleCredentials(
            credentials=SOURCE,
            role_arn='arn:aws:iam::111:role/dev',
            role_session_name='default_session',
            region='us-east-1',
            profile='base',
        )

        assert provider.credentials == Credentials('ASIATEMP', 'tempSecret', 'tempToken', EXPIRATION)
        mock_session.assert_called_once_with(
            aws_access_key_id='AKIASOURCE',
            aws_secret_access_key='sourceSecret',
            aws_session_token=None,
            region_name='us-east-1',
        )
        mock_sts.assume_role.assert_called_once_with(
            RoleArn='arn:aws:iam::111:role/dev',
            RoleSessionName='default_session',
        )

    @patch('aws_assume_role.providers.boto3.Session')
    def test_optional_parameters(self, mock_session):
        mock_sts = mock_sts_session(mock_session)
        mock_sts.assume_role.return_value = STS_RESPONSE

        AssumeRoleCredentials(
            credentials=SOURCE,
            role_arn='arn:aws:iam::111:role/dev',
            role_session_name='alice',
            external_id='ext-123',
            duration_seconds='900',
        )

        mock_sts.assume_role.assert_called_once_with(
            RoleArn='arn:aws:iam::111:role/dev',
            RoleSessionName='alice',
            ExternalId='ext-123',
            DurationSeconds=900,
        )

    @patch('aws_assume_role.providers.boto3.Session')
    def test_client_error_propagates(self, mock_session):
        mock_sts = mock_sts_session(mock_session)
        mock_sts.assume_role.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied', 'Message': 'Not authorized'}},
            'AssumeRole'
        )

        with pytest.raises(ClientError):
            AssumeRoleCredentials(SOURCE, 'arn:aws:iam::111:role/dev', 'default_session')


class TestMfaSessionCredentials:
    """Tests for MfaSessionCredentials."""

    def test_declines_without_serial(self):
        with pytest.raises(ValueError):
            MfaSessionCredentials(credentials=SOURCE, region='us-east-1')

    @patch('aws_assume_role.providers.boto3.Session')
    def test_session_with_given_code(self, mock_session):
        mock_sts = mock_sts_session(mock_session)
        mock_sts.get_session_token.return_value = STS_RESPONSE

        provider = MfaSessionCredentials(
            credentials=SOURCE,
            region='eu-west-1',
            serial_number='arn:aws:iam::111:mfa/alice',
            token_code='123456',
        )

        assert provider.credentials.session_token == 'tempToken'
        mock_sts.get_session_token.assert_called_once_with(
            SerialNumber='arn:aws:iam::111:mfa/alice',
            TokenCode='123456',
        )

    @patch('builtins.input', return_value=' 654321 ')
    @patch('aws_assume_role.providers.boto3.Session')
    def test_prompts_for_code(self, mock_session, mock_input):
        mock_sts = mock_sts_session(mock_session)
        mock_sts.get_session_token.return_value = STS_RESPONSE

        MfaSessionCredentials(credentials=SOURCE, serial_number='arn:aws:iam::111:mfa/alice')

        mock_input.assert_called_once()
        assert mock_sts.get_session_token.call_args.kwargs['TokenCode'] == '654321'
