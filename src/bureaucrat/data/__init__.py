"""Entity data operations for Bureaucrat."""

from bureaucrat.data.entity_query import EntityQuery
from bureaucrat.data.introspection import Introspector

__all__ = [
    "EntityQuery",
    "Introspector",
]
