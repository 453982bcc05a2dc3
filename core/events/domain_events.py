"""Change notifications for task trees and dependency edges."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.tasks_changed: Signal[int] = Signal()         # task_id
        self.progress_rolled_up: Signal[list] = Signal()   # updated ancestor ids
        self.dependencies_changed: Signal[int] = Signal()  # dependency_id


# SINGLE global instance
domain_events = DomainEvents()
