from __future__ import annotations

from enum import StrEnum

ALL = "all"


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Category(StrEnum):
    PERSONAL = "Personal"
    WORK = "Work"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    FINANCE = "Finance"
    OTHER = "Other"
