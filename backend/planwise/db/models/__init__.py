"""ORM models exposed for metadata discovery."""
from planwise.db.models.curriculum import Curriculum
from planwise.db.models.project import Project
from planwise.db.models.task import Task
from planwise.db.models.user import User

__all__ = [
    "Curriculum",
    "Project",
    "Task",
    "User",
]
