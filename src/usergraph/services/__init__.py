"""
Service layer between the GraphQL resolvers and the database
"""

from .user import UserService

__all__ = ["UserService"]
