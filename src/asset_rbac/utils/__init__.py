"""Utility modules."""

from asset_rbac.utils.validation import validate_email

__all__ = ["validate_email"]
