"""Standardized API response utilities."""

from typing import Any, Optional

from flask import jsonify


def message_response(message: str, code: int = 200, **extra: Any):
    """
    Create a JSON response carrying a human-readable message.

    Args:
        message: The message returned to the client
        code: HTTP status code (default 200)
        **extra: Additional top-level fields

    Returns:
        Flask JSON response tuple
    """
    response = {"message": message}
    response.update(extra)
    return jsonify(response), code


def error_response(message: str, code: int = 400, details: Optional[Any] = None):
    """
    Create a standardized error response.

    Args:
        message: Error message
        code: HTTP status code (default 400)
        details: Optional additional error details

    Returns:
        Flask JSON response tuple
    """
    response = {"message": message}
    if details is not None:
        response["details"] = details
    return jsonify(response), code
