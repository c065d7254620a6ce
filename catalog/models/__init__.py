"""
SQLModel database models.

Importing this package registers every table with SQLModel.metadata.

For modifications:
1. Edit the appropriate model file in catalog/models/
2. Create an Alembic migration to reflect the changes
"""

# Users
from catalog.models.user import Users

# Moderated content
from catalog.models.brand import Brands
from catalog.models.character import Characters
from catalog.models.figure import (
    FigureCharacters,
    FigureImages,
    Figures,
    FigureSeries,
    FigureTags,
    FigureVariantImages,
    FigureVariants,
)
from catalog.models.line import Lines
from catalog.models.series import Series

# Unmoderated catalog data
from catalog.models.tag import Tags
from catalog.models.system_config import SystemConfiguration

# Per-user data
from catalog.models.collection import UserFigures
from catalog.models.notification import Notifications
from catalog.models.review import ReviewImages, Reviews
from catalog.models.user_list import ListItems, Lists

__all__ = [
    "Users",
    # Moderated content
    "Figures",
    "Brands",
    "Lines",
    "Series",
    "Characters",
    # Figure dependent rows
    "FigureImages",
    "FigureTags",
    "FigureSeries",
    "FigureCharacters",
    "FigureVariants",
    "FigureVariantImages",
    "Tags",
    "SystemConfiguration",
    # Per-user data
    "UserFigures",
    "Reviews",
    "ReviewImages",
    "Lists",
    "ListItems",
    "Notifications",
]
