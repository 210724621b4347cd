"""Thin helper around the Fabric REST API using direct `requests` calls."""

import json

import requests

# Fabric API base URL
FABRIC_API_BASE = "https://api.fabric.microsoft.com/v1"


def is_success(status_code):
    return 200 <= status_code < 300


def fabric_api_request(method, endpoint, token, json_body=None):
    """
    Make a request to the Fabric REST API.

    Args:
        method: HTTP method ('GET', 'POST', etc.)
        endpoint: API endpoint (e.g., 'workspaces') or an absolute URL
        token: Bearer token for the Fabric API
        json_body: Optional request body dict

    Returns:
        tuple: (success: bool, status_code: int, response_json: dict)
            success is False only when the request itself could not be made.
            An empty body yields {}, a non-JSON body {'raw_response': text}.
    """
    if endpoint.startswith('http'):
        url = endpoint
    else:
        url = f"{FABRIC_API_BASE}/{endpoint}"

    headers = {
        'Authorization': f'Bearer {token}',
        'Content-Type': 'application/json'
    }

    try:
        response = requests.request(method, url, headers=headers, json=json_body)
    except requests.RequestException as e:
        return False, 0, {'error': str(e)}

    try:
        response_json = response.json() if response.text.strip() else {}
        if response_json is None:
            response_json = {}
    except ValueError:
        response_json = {'raw_response': response.text}

    return True, response.status_code, response_json


def get_paginated(endpoint, token, key='value'):
    """
    GET a paginated Fabric API collection, following continuationUri.

    Returns:
        tuple: (status_code, items) where items is None if any page failed
    """
    items = []
    status_code = 0

    while endpoint:
        success, status_code, response = fabric_api_request('GET', endpoint, token)
        if not success or not is_success(status_code):
            print(f"✗ Failed to list {key} from {endpoint} (HTTP {status_code}):")
            print(f"  {format_response(response)}")
            return status_code, None

        items.extend(response.get(key, []))
        endpoint = response.get('continuationUri')

    return status_code, items


def format_response(response_json):
    """Render a response body for operator output."""
    if isinstance(response_json, dict) and set(response_json) == {'raw_response'}:
        return response_json['raw_response']
    return json.dumps(response_json)
