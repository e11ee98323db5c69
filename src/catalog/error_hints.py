"""Error hints for catalog validation errors.

Maps pydantic error types and catalog field names to short remediation
hints shown by the ``validate-catalog`` command.
"""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to the catalog entry.",
    "string_type": "This field must be a text string.",
    "list_type": "This field must be a list of catalog entries.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_too_long": "The text is too long. Check maximum length requirement.",
    "string_pattern_mismatch": "Use lowercase letters, numbers, hyphens, or underscores only.",
    "none_required": "Catalog entries start unranked; leave position empty (null).",
    "extra_forbidden": "Unknown field. Remove it from the catalog entry.",
    "value_error": "Check that ids and names are unique within the catalog.",
    "catalog_size": "The catalog must contain exactly the configured number of values.",
    "file_not_found": "The file does not exist. Check the file path.",
    "file_unreadable": "The file could not be read as UTF-8 text. Check permissions and encoding.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "id": "Use a stable slug such as 'family' or 'inner-peace'.",
    "name": "Names must be unique ignoring letter case (e.g. 'Family' and 'family' clash).",
    "description": "Optional free text; omit the field if there is nothing to say.",
    "position": "Catalog entries start unranked; leave position empty (null).",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The pydantic error type (e.g., 'missing').
        field_name: Optional dotted field location for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(error_type, "Check the catalog file format.")


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'values.3.name').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
