"""
Repositories package for data access layer.
"""

from session_analyzer.repositories.session_repository import SessionRepository

__all__ = [
    'SessionRepository',
]
