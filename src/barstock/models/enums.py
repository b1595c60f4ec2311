"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class UserRole(str, enum.Enum):
    """Directory roles, most to least privileged."""

    ADMIN = "admin"
    STAFF = "staff"
    VIEWER = "viewer"


class StockStatus(str, enum.Enum):
    """Stored status of a daily stock record."""

    DRAFT = "draft"
    PUBLISHED = "published"


class DayStatus(str, enum.Enum):
    """Status of a whole date on the stock sheet. EMPTY means no rows exist."""

    EMPTY = "empty"
    DRAFT = "draft"
    PUBLISHED = "published"


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods for a sale."""

    CASH = "Cash"
    MOBILE_MONEY = "Mobile-Money"
