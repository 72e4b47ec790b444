"""Main Bureaucrat engine: the data domain."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bureaucrat.core.cache import EntityTypeCache
from bureaucrat.core.connection import DatabaseConnection
from bureaucrat.core.types import CachePolicy, EntityMeta
from bureaucrat.data.entity_query import EntityQuery
from bureaucrat.data.introspection import Introspector
from bureaucrat.exceptions import EntityTypeNotFoundError
from bureaucrat.schema.engine import MetadataStore
from bureaucrat.store.base import RelationalStore
from bureaucrat.store.relational import SQLAlchemyStore

logger = logging.getLogger(__name__)

# Bookkeeping tables some stores report alongside user tables
SYSTEM_TABLES = frozenset({"sqlite_sequence"})


class DataDomain:
    """Data domain inspector, cache and CRUD engine.

    The data domain inspects a relational database (the domain store) for
    entities to be managed. To avoid rerunning the costly inspection and to
    allow user overrides, the inferred model is persisted to a separate
    metadata store on first inspection and read back from there afterwards.

    Example:
        domain = DataDomain("sqlite:///meta.db", "sqlite:///app.db")
        domain.entity_types()
        user = domain.create("user", {"first_name": "Douglas"})
        domain.update("user", {"id": user["id"], "first_name": "Rick"})
    """

    def __init__(
        self,
        metadata_url: str,
        domain: str | RelationalStore,
        echo: bool = False,
        cache_policy: CachePolicy | None = None,
    ) -> None:
        """Initialize the data domain.

        Args:
            metadata_url: Metadata store database URL
            domain: Domain store database URL, or a ready relational store
            echo: Whether to echo SQL statements (for debugging)
            cache_policy: Entity type cache tuning
        """
        self._cache_policy = cache_policy or CachePolicy()
        self._meta_connection = DatabaseConnection(metadata_url, echo=echo)
        self._metadata = MetadataStore(self._meta_connection)

        if isinstance(domain, RelationalStore):
            self._store = domain
        else:
            self._store = SQLAlchemyStore(DatabaseConnection(domain, echo=echo))

        self._introspector = Introspector(self._store)
        self._cache = EntityTypeCache(
            self._load_entity_types, ttl_seconds=self._cache_policy.ttl_seconds
        )

        # Initialize metadata tables
        self._metadata.initialize()

    @property
    def metadata_store(self) -> MetadataStore:
        """The metadata store backing the entity types."""
        return self._metadata

    @property
    def store(self) -> RelationalStore:
        """The domain store."""
        return self._store

    def close(self) -> None:
        """Close both database connections."""
        self._store.close()
        self._meta_connection.close()

    def __enter__(self) -> DataDomain:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()

    # === Entity types ===

    def entity_types(self) -> list[EntityMeta]:
        """Return all entity types in the data domain.

        Entity types already in the metadata store come first, in persistence
        order. Domain tables they don't cover are introspected, persisted and
        appended in table listing order.
        """
        return self._cache.get()

    def entity_type(self, code: str) -> EntityMeta:
        """Get an entity type by code.

        Raises:
            EntityTypeNotFoundError: If no entity type has this code
        """
        entity_types = self.entity_types()
        for et in entity_types:
            if et.code == code:
                return et
        raise EntityTypeNotFoundError(code, [et.code for et in entity_types])

    def invalidate(self) -> None:
        """Forget cached entity types, e.g. after editing the metadata store."""
        self._cache.invalidate()

    def _system_tables(self) -> set[str]:
        return (
            set(SYSTEM_TABLES)
            | set(self._metadata.table_names)
            | set(self._cache_policy.excluded_tables)
        )

    def _unmapped_tables(self, entity_types: list[EntityMeta]) -> list[str]:
        mapped = {et.table for et in entity_types}
        ignored = self._system_tables()
        return [t for t in self._store.list_tables() if t not in mapped and t not in ignored]

    def _load_entity_types(self) -> list[EntityMeta]:
        entity_types = self._metadata.load_entity_types()
        unmapped = self._unmapped_tables(entity_types)
        if not unmapped:
            # No tables left to inspect
            return entity_types

        logger.info(f"Introspecting {len(unmapped)} unmapped tables: {', '.join(unmapped)}")
        for table in unmapped:
            inferred = self._introspector.inspect_table(table)
            entity_types.append(self._metadata.save_entity_type(inferred))
        return entity_types

    # === CRUD ===

    def _query(self, entity_type_code: str) -> EntityQuery:
        return EntityQuery(self._store, self.entity_type(entity_type_code))

    def create(self, entity_type_code: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create an entity.

        Args:
            entity_type_code: Entity type code
            data: Field values keyed by field code

        Returns:
            The data, merged with the store-generated identifier if any
        """
        return self._query(entity_type_code).create(data)

    def read(
        self,
        entity_type_code: str,
        ids: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read entities, optionally a single one by its identifier values.

        Args:
            entity_type_code: Entity type code
            ids: Identifier values keyed by field code
            limit: Maximum number of entities to return

        Returns:
            Entity data keyed by field code
        """
        return self._query(entity_type_code).read(ids=ids, limit=limit)

    def update(self, entity_type_code: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update a single entity.

        Args:
            entity_type_code: Entity type code
            data: Identifier values plus the fields to change

        Returns:
            The entity as stored after the update
        """
        return self._query(entity_type_code).update(data)

    def delete(self, entity_type_code: str, ids: Mapping[str, Any]) -> None:
        """Delete a single entity.

        Args:
            entity_type_code: Entity type code
            ids: Identifier values keyed by field code
        """
        self._query(entity_type_code).delete(ids)
