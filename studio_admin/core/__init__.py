"""
핵심 로직 모듈 (Qt-free list pipeline, transition tables and request workflow)
"""

from studio_admin.core.pipeline import ListQuery, ListViewConfig, PageResult, run_pipeline
from studio_admin.core.transitions import allowed_transitions, check_transition
from studio_admin.core.workflow import RequestInbox, REQUEST_HANDLERS

__all__ = [
    "ListQuery",
    "ListViewConfig",
    "PageResult",
    "run_pipeline",
    "allowed_transitions",
    "check_transition",
    "RequestInbox",
    "REQUEST_HANDLERS",
]
