"""Subscription tracker: records of paid services per user with period totals."""

__version__ = "0.1.0"
