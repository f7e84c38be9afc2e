"""Helpers shared by features and infrastructure."""

from user_service.utils.updates import UpdateResult, apply_updates

__all__ = ["UpdateResult", "apply_updates"]
