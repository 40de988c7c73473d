from .user import User, UserRole
from .project import Project
from .manpower import Manpower
from .material import Material
from .progress import Progress
from .finance import Finance

__all__ = [
    "User", "UserRole",
    "Project",
    "Manpower",
    "Material",
    "Progress",
    "Finance",
]
