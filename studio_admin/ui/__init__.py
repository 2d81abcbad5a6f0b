"""
UI 모듈 (PyQt6)

Qt widgets only; list state, workflow and session logic live in
``studio_admin.core`` and ``studio_admin.managers``.
"""
