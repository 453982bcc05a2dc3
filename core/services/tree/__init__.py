from core.services.tree.builder import TaskTree, build_task_tree
from core.services.tree.ordering import SiteSummary, list_sites, site_summaries, sort_root_nodes

__all__ = [
    "TaskTree",
    "build_task_tree",
    "SiteSummary",
    "sort_root_nodes",
    "list_sites",
    "site_summaries",
]
