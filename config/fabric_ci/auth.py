"""Authentication module: Azure CLI service principal login and Fabric tokens."""

from .utils import get_az_cli_path, run_command

FABRIC_RESOURCE = "https://api.fabric.microsoft.com"


def auth(client_id, client_secret, tenant_id):
    """
    Log the Azure CLI in as a service principal.

    Args:
        client_id: Service principal application (client) ID
        client_secret: Service principal secret
        tenant_id: Entra tenant ID

    Returns:
        bool: True if login succeeded
    """
    print(">> Logging into Azure via Service Principal...")
    result = run_command([
        get_az_cli_path(), 'login', '--service-principal',
        '--username', client_id,
        '--password', client_secret,
        '--tenant', tenant_id,
        '--allow-no-subscriptions',
        '--output', 'none'
    ])

    if result.returncode != 0:
        print("✗ Azure login failed")
        print(f"  stderr: {result.stderr.strip()}")
        return False

    print("✓ Logged into Azure")
    return True


def get_fabric_token():
    """
    Get a Fabric API access token from the logged in Azure CLI session.

    Returns:
        str: Access token, or None if failed
    """
    print(">> Fetching Fabric Access Token...")
    result = run_command([
        get_az_cli_path(), 'account', 'get-access-token',
        '--resource', FABRIC_RESOURCE,
        '--query', 'accessToken',
        '-o', 'tsv'
    ])

    token = result.stdout.strip() if result.returncode == 0 else ''
    if not token:
        print("✗ Failed to get Fabric access token")
        print(f"  stderr: {result.stderr.strip()}")
        return None

    return token
