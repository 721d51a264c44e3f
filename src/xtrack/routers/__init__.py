"""API routers, mounted under /api.

Includes routes for:
- /auth - Session login
- /users - User management (admin)
- /accounts - Trading accounts and their API tokens
- /ingest - Statistic ingestion (X-API-Token)
- /statistics - Statistic history and summaries
"""
from xtrack.routers.accounts import router as accounts_router
from xtrack.routers.auth import router as auth_router
from xtrack.routers.ingest import router as ingest_router
from xtrack.routers.statistics import router as statistics_router
from xtrack.routers.users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "accounts_router",
    "ingest_router",
    "statistics_router",
]
