"""Workspace management module: naming, lookup and idempotent creation."""

from .fabric_api import fabric_api_request, format_response, get_paginated, is_success


def workspace_name_for_branch(prefix, branch):
    """
    Build the workspace display name for a branch.

    Slashes in the branch are replaced with hyphens, e.g.
    ('proj', 'feature/abc') -> 'proj-feature-abc'.
    """
    safe_branch = branch.replace('/', '-')
    return f"{prefix}-{safe_branch}"


def list_workspaces(token):
    """
    List all workspaces visible to the caller.

    Returns:
        list: Workspace dicts ({id, displayName, ...}), or None if the call failed
    """
    _, workspaces = get_paginated('workspaces', token)
    return workspaces


def find_workspace_id(workspaces, workspace_name):
    """Return the id of the workspace whose displayName matches exactly, else None."""
    for workspace in workspaces:
        if workspace.get('displayName') == workspace_name:
            return workspace.get('id')
    return None


def get_workspace_id(token, workspace_name):
    """
    Get the UUID of a workspace by name.

    Returns:
        str: Workspace UUID or None if not found (or the lookup failed)
    """
    workspaces = list_workspaces(token)
    if workspaces is None:
        return None
    return find_workspace_id(workspaces, workspace_name)


def create_workspace(token, workspace_name, capacity_id):
    """
    Create a workspace on the given capacity.

    Returns:
        str: New workspace UUID, or None if creation failed
    """
    request_body = {
        'displayName': workspace_name,
        'capacityId': capacity_id
    }

    success, status_code, response = fabric_api_request('POST', 'workspaces', token, request_body)

    if not success or not is_success(status_code):
        print(f"✗ Failed to create workspace (HTTP {status_code}):")
        print(f"  {format_response(response)}")
        return None

    workspace_id = response.get('id')
    if not workspace_id:
        print(f"✗ Workspace created but no id returned: {format_response(response)}")
        return None

    return workspace_id


def get_or_create_workspace(token, workspace_name, capacity_id):
    """
    Ensure a workspace with this exact display name exists.

    Not safe against two runs racing to create the same name.

    Returns:
        tuple: (workspace_id, created) - workspace_id is None on failure
    """
    workspaces = list_workspaces(token)
    if workspaces is None:
        return None, False

    workspace_id = find_workspace_id(workspaces, workspace_name)
    if workspace_id:
        print(f">> ✓ Re-using existing workspace {workspace_id}")
        return workspace_id, False

    print(f">> Workspace not found. Creating '{workspace_name}' on capacity {capacity_id}...")
    workspace_id = create_workspace(token, workspace_name, capacity_id)
    if not workspace_id:
        return None, False

    print(f">> ✓ Created workspace {workspace_id}")
    return workspace_id, True
