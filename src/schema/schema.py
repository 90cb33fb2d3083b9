"""
Centralized JSON Schema Loading Module.

This module loads JSON schema files from disk once at import time and
exposes them as module-level constants for use throughout the application.

File Location:
    Schemas are expected to be in the same directory as this module
    (src/schema/). The path is resolved using __file__ so it works
    regardless of the current working directory.

Error Handling:
    - FileNotFoundError: Schema file doesn't exist at expected path
    - json.JSONDecodeError: Schema file contains invalid JSON syntax

    Both errors include the file name so a broken install fails fast at
    startup instead of on the first webhook.
"""
import json
from pathlib import Path
from typing import Dict, Any

# Locate schema directory
SCHEMA_DIR = Path(__file__).parent

def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """
    Load a JSON schema file from the schema directory.

    Args:
        schema_filename: Name of the JSON schema file (e.g., "sponsorship_event_schema.json")

    Returns:
        Parsed JSON schema as a dictionary, ready for use with jsonschema library

    Raises:
        FileNotFoundError: If the schema file doesn't exist at the expected location.
        json.JSONDecodeError: If the schema file exists but contains invalid JSON.

    Example:
        >>> schema = _load_schema("sponsorship_event_schema.json")
        >>> schema["$schema"]
        "http://json-schema.org/draft-07/schema#"
    """
    schema_path = SCHEMA_DIR / schema_filename

    if not schema_path.exists():
        raise FileNotFoundError(
            f"Schema file not found: {schema_path}. "
            f"Expected location: {SCHEMA_DIR}"
        )

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in schema file {schema_filename}: {e.msg}",
            e.doc,
            e.pos
        ) from e


# GitHub sponsorship webhook schema (Draft 7). Only "action" matters for
# gating; the sponsor and tier fields are type-checked because they are logged.
SPONSORSHIP_EVENT_SCHEMA = _load_schema("sponsorship_event_schema.json")

