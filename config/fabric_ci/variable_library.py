"""Variable library module for Fabric variables.json files.

A variable library file looks like:

    {
      "$schema": "<VARIABLES_SCHEMA_URL>",
      "variables": [
        {"name": "API_URL", "note": "", "type": "String", "value": "https://..."}
      ]
    }

Variables are identified by name. Merging is non-destructive: entries that
are no longer fetched stay in the file.
"""

import json
from pathlib import Path

VARIABLES_SCHEMA_URL = (
    "https://developer.microsoft.com/json-schemas/fabric/item/"
    "variableLibrary/definition/variables/1.0.0/schema.json"
)


def make_variable(name, value, note=""):
    return {
        'name': name,
        'note': note,
        'type': 'String',
        'value': value
    }


def variable_prefix(prefix, environment):
    return f"{prefix}_{environment}_"


def strip_prefix(name, prefix, environment):
    """Remove the `{prefix}_{environment}_` prefix once from the start of `name`."""
    full_prefix = variable_prefix(prefix, environment)
    if name.startswith(full_prefix):
        return name[len(full_prefix):]
    return name


def filter_variables(variables, prefix, environment):
    """
    Keep the variables named `{prefix}_{environment}_*`, with that prefix stripped.

    Args:
        variables: Iterable of {'name', 'value'} dicts
        prefix: Variable prefix (e.g., 'vt')
        environment: Environment tag (e.g., 'dev')

    Returns:
        list: {'name', 'value'} dicts with stripped names, in input order
    """
    full_prefix = variable_prefix(prefix, environment)
    return [
        {'name': strip_prefix(v['name'], prefix, environment), 'value': v['value']}
        for v in variables
        if v['name'].startswith(full_prefix)
    ]


def escape_json_value(value):
    """
    Escape a value for embedding inside a JSON string literal.

    Backslashes go first so the escapes added for quotes and newlines
    are not escaped again.
    """
    return value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')


def build_variables(filtered, escape_values=False):
    """Turn filtered {'name', 'value'} dicts into variable library records."""
    variables = []
    for item in filtered:
        value = escape_json_value(item['value']) if escape_values else item['value']
        variables.append(make_variable(item['name'], value))
        print(f"  Processing: {item['name']}")
    return variables


def merge_variables(existing, new):
    """
    Merge freshly fetched variables into the existing ones.

    Existing entries keep their position (replaced by the fetched record when
    the name matches); fetched names not seen before are appended in fetch
    order. Duplicate fetched names collapse to the last record at the first
    position. Existing entries are never dropped, so merge(E, []) == E.

    Args:
        existing: List of variable dicts currently in the library
        new: List of variable dicts just fetched

    Returns:
        list: Merged variable dicts (names unique when `existing` has unique names)
    """
    incoming = {}
    for variable in new:
        incoming[variable['name']] = variable

    existing_names = {variable['name'] for variable in existing}
    merged = [incoming.get(variable['name'], variable) for variable in existing]
    merged.extend(variable for name, variable in incoming.items() if name not in existing_names)
    return merged


def merge_stats(existing, new, merged):
    """
    Summary counts for a merge (reporting only).

    Returns:
        dict: {total, added, updated, unchanged}, each clamped at zero
    """
    total = len(merged)
    added = max(total - len(existing), 0)
    updated = max(len(new) - added, 0)
    unchanged = max(len(existing) - updated, 0)
    return {
        'total': total,
        'added': added,
        'updated': updated,
        'unchanged': unchanged
    }


def create_fabric_json(variables):
    return {
        '$schema': VARIABLES_SCHEMA_URL,
        'variables': variables
    }


def read_existing_variables(file_path):
    """
    Read the variables array of an existing library file.

    Returns:
        list: Variable dicts; empty if the file is missing, not valid JSON,
            or not shaped like a variable library
    """
    path = Path(file_path)
    if not path.exists():
        return []

    print("Reading existing variables from file...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"  ⚠ Could not parse {path}, treating it as empty: {e}")
        return []

    if not isinstance(document, dict):
        print(f"  ⚠ {path} is not a JSON object, treating it as empty")
        return []

    variables = document.get('variables') or []
    if not isinstance(variables, list) or not all(_is_variable(v) for v in variables):
        print(f"  ⚠ {path} has a malformed 'variables' array, treating it as empty")
        return []
    return variables


def _is_variable(entry):
    return isinstance(entry, dict) and isinstance(entry.get('name'), str)


def count_variables(file_path):
    return len(read_existing_variables(file_path))


def write_variable_library(file_path, variables):
    """Write the full library document, creating parent directories as needed."""
    path = Path(file_path)
    if not path.parent.exists():
        print(f"Creating directory: {path.parent}")
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(create_fabric_json(variables), f, indent=2, ensure_ascii=False)
        f.write('\n')
