"""
Data-access services: repositories, wiring and relationship lookups.
"""

from .container import Repositories, build_repositories
from .repository import Repository

__all__ = ['Repositories', 'Repository', 'build_repositories']
