"""
Domain enumerations shared by the models, the rules and the request schemas.

Values are the wire strings clients send and receive.
"""
from enum import Enum


class ProjectStatus(str, Enum):
    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"


class ReportStatus(str, Enum):
    """Whether work had started when a progress report was filed."""
    STARTED = "Started"
    NOT_STARTED = "Not Started"


class MaterialType(str, Enum):
    AVAILABLE = "Available"  # already on site
    REQUIRED = "Required"    # requested for the site


class MaterialStatus(str, Enum):
    PENDING = "Pending"
    ORDERED = "Ordered"
    DELIVERED = "Delivered"
    IN_STOCK = "In Stock"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ExpenseCategory(str, Enum):
    MATERIAL = "Material"
    LABOR = "Labor"
    EQUIPMENT = "Equipment"
    OTHER = "Other"
