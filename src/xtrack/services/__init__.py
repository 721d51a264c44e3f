"""Service layer: business rules over repositories and domain error mapping."""
from xtrack.services.accounts import AccountService
from xtrack.services.authorization import ApiIdentity, Identity
from xtrack.services.error_mapper import ErrorMapper, register_exception_handlers
from xtrack.services.pagination import Page, PageRequest
from xtrack.services.statistics import StatisticService
from xtrack.services.users import UserService

__all__ = [
    "AccountService",
    "ApiIdentity",
    "ErrorMapper",
    "Identity",
    "Page",
    "PageRequest",
    "StatisticService",
    "UserService",
    "register_exception_handlers",
]
