"""Command-line interface for aws-assume-role."""

import sys
import json
import shutil
import logging
import argparse

from botocore.exceptions import BotoCoreError, ClientError
from tabulate import tabulate

from .credentials import format_expiration
from .exceptions import AwsAssumeRoleError
from .store import PROFILE_FIELDS, open_store


def list_profiles(store):
    """List all profiles with their role settings and keyring status."""
    terminal_width = shutil.get_terminal_size().columns

    print("\nAWS Assume Role Profiles")
    print("=" * min(80, terminal_width))
    print()

    profiles = store.profiles()

    if not profiles:
        print(f"No profiles found in {store.config_path}")
        return 0

    table_data = []
    for profile in profiles:
        config = store.profile_config(profile) or {}
        in_keyring = store.secret_store.fetch(profile) is not None
        table_data.append([
            profile,
            store.profile_region(profile) or 'N/A',
            store.profile_role(profile) or 'N/A',
            config.get('source_profile', 'N/A'),
            'yes' if config.get('mfa_serial') else 'no',
            'yes' if in_keyring else 'no',
        ])

    headers = ['Profile', 'Region', 'Role ARN', 'Source', 'MFA', 'Keyring']
    print(tabulate(table_data, headers=headers, tablefmt='fancy_grid'))
    print(f"\n{len(profiles)} profile(s)\n")
    return 0


def configure_profile(store, args):
    """Create or update a profile from command-line options."""
    fields = {
        field: getattr(args, field)
        for field in PROFILE_FIELDS + ('access_key_id', 'secret_access_key')
        if getattr(args, field) is not None
    }
    store.save_profile(args.name, fields)
    print(f"Saved profile {args.name}")
    if fields.get('access_key_id') and fields.get('secret_access_key'):
        print("   Access keys stored in the keyring")
    return 0


def delete_profile(store, name, assume_yes=False):
    if not assume_yes:
        confirmation = input(f"   Delete profile '{name}' and its keyring entry? Type 'yes' to continue: ").strip().lower()
        if confirmation != 'yes':
            print("Operation cancelled.")
            return 1

    store.delete_profile(name)
    print(f"Deleted profile {name}")
    return 0


def migrate_profiles(store, name=None, migrate_all=False):
    if migrate_all:
        migrated = store.migrate_all()
    else:
        store.migrate_profile(name)
        migrated = [name]

    for profile in migrated:
        print(f"   Migrated {profile}")
    print(f"\n{len(migrated)} profile(s) migrated")
    return 0


def print_credentials(store, name=None, output_format='env'):
    credentials = store.credentials(name)
    if credentials is None:
        print(f"No credentials found for profile {name or store.profile_name}", file=sys.stderr)
        return 1

    if output_format == 'json':
        # Same shape as a credential_process response
        data = {
            'Version': 1,
            'AccessKeyId': credentials.access_key_id,
            'SecretAccessKey': credentials.secret_access_key,
        }
        if credentials.session_token:
            data['SessionToken'] = credentials.session_token
        if credentials.expiration:
            data['Expiration'] = credentials.expiration.isoformat()
        print(json.dumps(data, indent=2))
    else:
        for key, value in credentials.to_env().items():
            print(f"export {key}={value}")
        print(f"# Expires in: {format_expiration(credentials)}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description='Manage AWS profiles with keys kept in the OS keyring',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  aws-assume-role                                   # List all profiles
  aws-assume-role configure base --access-key-id AKIA... --secret-access-key ...
  aws-assume-role configure dev --source-profile base --role-arn arn:aws:iam::111:role/dev
  aws-assume-role credentials dev                   # Print export lines for 'dev'
  aws-assume-role migrate --all                     # Move plaintext keys into the keyring
  aws-assume-role delete dev                        # Delete 'dev' and its keyring entry
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser('list', help='List profiles (default)')

    configure = subparsers.add_parser('configure', help='Create or update a profile')
    configure.add_argument('name', metavar='PROFILE')
    for field in PROFILE_FIELDS + ('access_key_id', 'secret_access_key'):
        configure.add_argument('--' + field.replace('_', '-'), dest=field)

    delete = subparsers.add_parser('delete', help='Delete a profile and its keyring entry')
    delete.add_argument('name', metavar='PROFILE')
    delete.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation')

    migrate = subparsers.add_parser('migrate', help='Move plaintext keys into the keyring')
    migrate.add_argument('name', nargs='?', metavar='PROFILE')
    migrate.add_argument('--all', action='store_true', help='Migrate every profile')

    credentials = subparsers.add_parser('credentials', help='Resolve and print credentials')
    credentials.add_argument('name', nargs='?', metavar='PROFILE')
    credentials.add_argument('--format', choices=['env', 'json'], default='env')

    return parser


def main(argv=None):
    """Main function to parse arguments and route to appropriate command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.command == 'migrate' and not args.all and not args.name:
        print("Error: give a PROFILE or --all", file=sys.stderr)
        return 1

    store = open_store()

    try:
        if args.command == 'configure':
            return configure_profile(store, args)
        elif args.command == 'delete':
            return delete_profile(store, args.name, assume_yes=args.yes)
        elif args.command == 'migrate':
            return migrate_profiles(store, args.name, migrate_all=args.all)
        elif args.command == 'credentials':
            return print_credentials(store, args.name, output_format=args.format)
        else:
            return list_profiles(store)
    except AwsAssumeRoleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ClientError as e:
        error_code = e.response['Error']['Code']
        print(f"AWS Error ({error_code}): {e.response['Error']['Message']}", file=sys.stderr)
        return 1
    except BotoCoreError as e:
        print(f"Error: AWS connection failed: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
