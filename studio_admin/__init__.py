"""
Studio Admin - 요가 스튜디오 관리자 콘솔

Desktop back-office for members, instructors, workshops, schedules, studios,
inquiries and the request approval inbox.
"""

__version__ = "1.0.0"
