"""
Access-control policies.
"""

from typing import Any

from heirloom.core.interfaces import IAccessPolicy


class OwnerOrSharedPolicy(IAccessPolicy):
    """An item is visible when it is not private or the user owns it."""

    def __init__(self, owner_field: str = "userId", private_field: str = "isPrivate"):
        self.owner_field = owner_field
        self.private_field = private_field

    def visibility_filter(self, user_id: str) -> dict[str, Any]:
        return {
            "$or": [
                {self.private_field: {"$eq": False}},
                {self.owner_field: {"$eq": user_id}},
            ]
        }
