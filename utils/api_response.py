"""
Standardized response helpers.

Every reservation operation returns the same envelope:

    Success:  {"success": true, "message": "...", "data": {...}}
    Error:    {"success": false, "error": "Spanish error message"}

Usage:
    from utils.api_response import service_result, api_error

    return service_result(get_message('reservation_created'), data=reservation)
    return api_error('Datos requeridos', status=400)
"""

from flask import jsonify
from typing import Any


def service_result(message: str, data: Any = None, success: bool = True) -> dict:
    """
    Build the result envelope returned by the service layer.

    Args:
        message: User-facing message (Spanish).
        data: Payload (reservation dict, batch outcome, ...).
        success: Overall outcome flag.

    Returns:
        dict with success, message and data
    """
    return {'success': success, 'message': message, 'data': data}


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message (Spanish).
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., conflicting_reservation_id).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    # Merge extra fields for additional error context
    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status
