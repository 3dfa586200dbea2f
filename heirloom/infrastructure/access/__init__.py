"""Access-control policies."""

from heirloom.infrastructure.access.policy import OwnerOrSharedPolicy

__all__ = ["OwnerOrSharedPolicy"]
