"""SQL statement builders."""

from bureaucrat.sql.builder import Delete, Insert, RenderedSQL, Select, Update

__all__ = [
    "Select",
    "Insert",
    "Update",
    "Delete",
    "RenderedSQL",
]
