"""Git integration module for connecting Fabric workspaces to GitHub."""

from .fabric_api import fabric_api_request, format_response, is_success

# Error codes Fabric returns when the workspace is already linked
ALREADY_CONNECTED_ERROR_CODES = (
    'WorkspaceAlreadyConnectedToGit',
    'GitIntegrationAlreadyConnected',
    'GitConnectionAlreadyExists',
)


def build_git_provider_details(git_config):
    """
    Build the gitProviderDetails block for the connect request.

    Args:
        git_config: Dict with 'provider', 'organization', 'repository',
                    'branch', 'directory' and, for Azure DevOps, 'project'

    Returns:
        dict: gitProviderDetails payload
    """
    provider = git_config.get('provider', 'GitHub')
    details = {'gitProviderType': provider}

    if provider == 'AzureDevOps':
        details['organizationName'] = git_config.get('organization')
        details['projectName'] = git_config.get('project')
    else:
        details['ownerName'] = git_config.get('organization')

    details['repositoryName'] = git_config.get('repository')
    details['branchName'] = git_config.get('branch')
    details['directoryName'] = git_config.get('directory', '/')
    return details


def extract_error_code(response_json):
    """Return `errorCode` or `error.code` from a Fabric error body, else None."""
    if not isinstance(response_json, dict):
        return None
    error_code = response_json.get('errorCode')
    if not error_code and isinstance(response_json.get('error'), dict):
        error_code = response_json['error'].get('code')
    return error_code or None


def connect_workspace_to_git(token, workspace_id, git_config, connection_id):
    """
    Connect a Fabric workspace to a Git repository.

    An "already connected" answer counts as success.

    Args:
        token: Fabric API bearer token
        workspace_id: Workspace UUID
        git_config: See build_git_provider_details
        connection_id: Pre-configured Fabric connection ID for the Git provider

    Returns:
        bool: True if connected (or already connected), False otherwise
    """
    request_body = {
        "gitProviderDetails": build_git_provider_details(git_config),
        "myGitCredentials": {
            "source": "ConfiguredConnection",
            "connectionId": connection_id
        }
    }

    success, status_code, response = fabric_api_request(
        'POST', f'workspaces/{workspace_id}/git/connect', token, request_body)

    if success and is_success(status_code):
        print(">> ✓ Successfully connected to Git repository")
        return True

    if not response:
        print("✗ Failed to connect Git - received empty response")
        return False

    error_code = extract_error_code(response)
    if error_code in ALREADY_CONNECTED_ERROR_CODES:
        print(f">> ⚠ Git integration already exists ({error_code}), skipping")
        return True

    print(f"✗ Failed to connect Git (HTTP {status_code}):")
    print(f"  {format_response(response)}")
    return False
