"""Protocol interfaces for pluggable backends."""

from asset_rbac.protocols.database import Database, Row

__all__ = ["Database", "Row"]
