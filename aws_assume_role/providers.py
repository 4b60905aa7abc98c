"""STS backed credential providers for role assumption and MFA sessions."""

import logging

import boto3

from .credentials import Credentials

logger = logging.getLogger(__name__)


def _sts_client(credentials, region=None):
    session = boto3.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=region,
    )
    return session.client('sts')


class AssumeRoleCredentials:
    """
    Temporary credentials for a role, obtained with sts:AssumeRole.

    Args:
        credentials: Source credentials used to call STS
        role_arn: ARN of the role to assume
        role_session_name: Session name recorded by STS
        external_id: Optional external id required by the role's trust policy
        region: Region for the STS endpoint
        profile: Name of the profile the source credentials came from
        duration_seconds: Optional session duration
    """

    def __init__(self, credentials, role_arn, role_session_name, external_id=None,
                 region=None, profile=None, duration_seconds=None):
        self.role_arn = role_arn
        self.role_session_name = role_session_name
        self.profile = profile

        params = {
            'RoleArn': role_arn,
            'RoleSessionName': role_session_name,
        }
        if external_id:
            params['ExternalId'] = external_id
        if duration_seconds:
            params['DurationSeconds'] = int(duration_seconds)

        logger.debug(f"Assuming {role_arn} with credentials from {profile}")
        response = _sts_client(credentials, region).assume_role(**params)
        self.credentials = Credentials.from_sts(response['Credentials'])


class MfaSessionCredentials:
    """
    Session credentials obtained with sts:GetSessionToken and an MFA code.

    The token code is prompted for on stdin unless one is passed in.
    """

    def __init__(self, credentials, region=None, serial_number=None, profile=None,
                 source_profile=None, token_code=None, duration_seconds=None):
        if not serial_number:
            raise ValueError('An MFA serial number is required for an MFA session')

        self.serial_number = serial_number
        self.profile = profile
        self.source_profile = source_profile

        if token_code is None:
            token_code = input(f"Enter MFA code for {serial_number}: ").strip()

        params = {
            'SerialNumber': serial_number,
            'TokenCode': token_code,
        }
        if duration_seconds:
            params['DurationSeconds'] = int(duration_seconds)

        logger.debug(f"Requesting MFA session for {serial_number}")
        response = _sts_client(credentials, region).get_session_token(**params)
        self.credentials = Credentials.from_sts(response['Credentials'])
