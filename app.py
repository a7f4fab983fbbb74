"""
ASGI entry point: `uvicorn app:app`.

The application lives in gym_backend/main.py:
- gym_backend/models/ - Pydantic models
- gym_backend/routes/ - API endpoints organized by domain
- gym_backend/services/ - Business logic
- gym_backend/database/ - Connection, schema and stores
- gym_backend/reports/ - HTML/PDF measurement reports
- gym_backend/utils/ - Utility functions
"""

from gym_backend.main import app

__all__ = ['app']
