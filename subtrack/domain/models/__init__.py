"""Domain models for the subscription tracker."""

from .pagination import PaginationMeta, PaginationParams, SubscriptionPage
from .subscription import UNSET, SubscriptionPatch, SubscriptionPayload, SubscriptionRecord

__all__ = [
    "PaginationMeta",
    "PaginationParams",
    "SubscriptionPage",
    "SubscriptionPatch",
    "SubscriptionPayload",
    "SubscriptionRecord",
    "UNSET",
]
