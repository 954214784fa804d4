"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Dict, Optional

from flask import request


def get_user_identity(request_obj=None) -> Dict[str, str]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'
    headers = getattr(request_obj, 'headers', None)
    user_agent = headers.get('User-Agent') if headers is not None else None

    return {
        'user_ip': user_ip,
        'user_agent': user_agent or 'unknown'
    }


def get_json_body() -> Dict[str, Any]:
    """Request JSON body, or an empty dict when there is none."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_limit(value: Optional[str], default: int, maximum: int = 100) -> int:
    """Parse a ?limit= query value, clamped to 1..maximum."""
    try:
        limit = int(value) if value is not None else default
    except ValueError:
        limit = default
    return max(1, min(limit, maximum))
