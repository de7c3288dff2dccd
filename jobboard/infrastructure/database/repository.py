"""Collection operations used by the action executor.

A ``CollectionRepository`` performs exactly one of the four operation kinds
the gateway supports against one entity table:

- ``create``: insert one record
- ``find_one``: first record matching a query, or None
- ``find_many``: every record matching a query (possibly empty)
- ``find_one_and_update``: patch the first matching record

Queries are flat mappings of column name to value. A scalar value matches by
equality; a list, tuple or set matches when the column value is a member of
it. Keys that are not columns of the table are logged and ignored.
"""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy import ColumnElement, Select, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.infrastructure.database.base import BaseModel

MEMBERSHIP_TYPES = (list, tuple, set, frozenset)


class CollectionRepository[T: BaseModel]:
    """Single-operation access to one entity table.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        self._columns = set(inspect(model_class).columns.keys())

    @property
    def name(self) -> str:
        """Table name, used in log lines."""
        return self.model_class.__tablename__

    def _conditions(self, query: Mapping[str, object]) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        for field, value in query.items():
            if field not in self._columns:
                logger.warning(
                    "Ignoring query on non-existent field '{}' of {}",
                    field,
                    self.name,
                )
                continue
            column = getattr(self.model_class, field)
            if isinstance(value, MEMBERSHIP_TYPES):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    def _select(self, query: Mapping[str, object]) -> Select[tuple[T]]:
        return (
            select(self.model_class)
            .where(*self._conditions(query))
            .order_by(self.model_class.created_at, self.model_class.id)
        )

    async def create(self, values: Mapping[str, object]) -> T:
        """Insert one record.

        Args:
            values: Column values for the new record.

        Returns:
            T: The stored record with identity and timestamps populated.
        """
        instance = self.model_class(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)

        logger.debug("Created {} record {}", self.name, instance.id)
        return instance

    async def find_one(self, query: Mapping[str, object]) -> T | None:
        """Return the first record matching ``query``, or None."""
        result = await self.session.execute(self._select(query).limit(1))
        instance = result.scalars().first()

        logger.debug(
            "find_one on {} with fields {}: {}",
            self.name,
            list(query.keys()),
            "found" if instance is not None else "no match",
        )
        return instance

    async def find_many(self, query: Mapping[str, object]) -> list[T]:
        """Return every record matching ``query``; an empty query matches all."""
        result = await self.session.execute(self._select(query))
        instances = list(result.scalars().all())

        logger.debug(
            "find_many on {} with fields {}: {} records",
            self.name,
            list(query.keys()),
            len(instances),
        )
        return instances

    async def find_one_and_update(
        self, query: Mapping[str, object], values: Mapping[str, object]
    ) -> tuple[T | None, int]:
        """Patch the first record matching ``query``.

        Args:
            query: Conditions selecting the record.
            values: Column values to overwrite.

        Returns:
            tuple[T | None, int]: The updated record (None when nothing matched)
                and the number of records matched (0 or 1).
        """
        instance = await self.find_one(query)
        if instance is None:
            logger.debug("find_one_and_update on {} matched no record", self.name)
            return None, 0

        for key, value in values.items():
            setattr(instance, key, value)

        if values:
            await self.session.flush()
            await self.session.refresh(instance)

        logger.debug(
            "Updated {} record {} - fields: {}",
            self.name,
            instance.id,
            list(values.keys()),
        )
        return instance, 1
