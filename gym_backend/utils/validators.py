"""
Validation utilities
"""
from typing import Optional

from gym_backend.config import MAX_PAGE_SIZE
from gym_backend.errors import BadRequestError


def validate_gym_id(gym_id: Optional[str]) -> int:
    """
    Validate the tenant header

    Args:
        gym_id: Raw X-Gym-Id header value

    Returns:
        Gym id as a positive integer

    Raises:
        BadRequestError: If the header is missing or not a positive integer
    """
    if gym_id is None or not gym_id.strip():
        raise BadRequestError("Falta el encabezado X-Gym-Id")

    try:
        value = int(gym_id.strip())
    except ValueError:
        raise BadRequestError("X-Gym-Id invalido")

    if value <= 0:
        raise BadRequestError("X-Gym-Id invalido")
    return value


def validate_page_request(page: int, size: int) -> None:
    """
    Reject out-of-policy pagination before anything reaches storage

    Raises:
        BadRequestError: If size is above MAX_PAGE_SIZE or below 1, or page is negative
    """
    if size > MAX_PAGE_SIZE:
        raise BadRequestError(f"size maximo permitido: {MAX_PAGE_SIZE}")
    if size < 1:
        raise BadRequestError("size debe ser mayor que 0")
    if page < 0:
        raise BadRequestError("page no puede ser negativo")


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trim free text; empty or whitespace-only becomes None"""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None
