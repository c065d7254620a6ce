"""Utility modules"""

from catalog.utils.slugs import slugify

__all__ = ["slugify"]
