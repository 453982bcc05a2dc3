from core.services.task.service import TaskService
from core.services.task.validation import MAX_CHILDREN, MAX_TASK_DEPTH

__all__ = ["TaskService", "MAX_CHILDREN", "MAX_TASK_DEPTH"]
