"""Privileges feature: categories, privilege sets and evaluation."""

from .entities import Category
from .repositories import CategoryRepository, PrivilegeRepository
from .services import PrivilegeService

__all__ = ["Category", "CategoryRepository", "PrivilegeRepository", "PrivilegeService"]
