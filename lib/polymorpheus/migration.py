# polymorpheus/migration.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Migration helpers which add polymorphic triggers and constraints.

Given a table and its polymorphic foreign key columns, e.g. a ``pets``
table which belongs either to a ``cats`` row or to a ``dogs`` row::

    from polymorpheus import add_polymorphic_constraints

    def upgrade():
        add_polymorphic_constraints(
            op,
            "pets",
            {"kitty_id": "cats.name", "dog_id": "dogs.id"},
            unique=True,
        )

emits, in this order:

* ``DROP TRIGGER IF EXISTS`` for the BEFORE INSERT and BEFORE UPDATE
  triggers, then ``CREATE TRIGGER`` for both; the triggers refuse any row
  which doesn't have exactly one of the columns set;
* when ``unique`` is given, one ``CREATE UNIQUE INDEX`` per column;
* one ``ALTER TABLE .. ADD CONSTRAINT .. FOREIGN KEY`` per column.

Columns are always processed in sorted order, so the same arguments
produce the same statements and names on every run.

The ``bind`` is anything with an ``execute()`` method accepting a
SQLAlchemy executable: a :class:`~sqlalchemy.engine.Connection`, an
Alembic ``op``, or a mock engine from
:func:`sqlalchemy.create_mock_engine`.  The generator itself performs no
I/O; :func:`.polymorphic_triggers` and :func:`.polymorphic_constraints`
return the statements without executing them.

"""

from __future__ import annotations

import collections.abc as collections_abc
from typing import Any
from typing import List
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Union

from sqlalchemy import exc as sa_exc

from . import log
from . import naming
from .ddl import AddPolymorphicForeignKey
from .ddl import CreatePolymorphicIndex
from .ddl import CreatePolymorphicTrigger
from .ddl import DropPolymorphicTrigger
from .util import column_name
from .util import table_name

_UniqueArg = Union[None, bool, str, Sequence[str]]


@log.class_logger
class PolymorphicConstraints:
    """Build the DDL guarding one set of polymorphic columns.

    All arguments are checked in the constructor, so a malformed
    ``unique`` option or an empty column set raises
    :exc:`sqlalchemy.exc.ArgumentError` before any statement exists.

    :param table: table name or :class:`~sqlalchemy.schema.Table`.

    :param columns: mapping of column name to ``"table.column"`` target,
     or, when only triggers are wanted, a sequence of column names.

    :param unique: ``True`` for one unique index per column, a column
     name or a sequence of column names to add to each index, or a false
     value for no indexes.

    :param max_identifier_length: identifier limit used when naming
     triggers, indexes and constraints.

    """

    def __init__(
        self,
        table: Any,
        columns: Union[Mapping[str, str], Sequence[str]],
        unique: _UniqueArg = None,
        max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
    ) -> None:
        self.table = _coerce_table(table)
        self.targets = _coerce_columns(columns)
        self.columns = sorted(self.targets)
        self.unique_columns = _coerce_unique(unique)
        self.max_identifier_length = _coerce_length(max_identifier_length)

    def drop_triggers(self) -> List[DropPolymorphicTrigger]:
        return [
            DropPolymorphicTrigger(
                self.table, action, self.columns, self.max_identifier_length
            )
            for action in (naming.INSERT, naming.UPDATE)
        ]

    def create_triggers(self) -> List[CreatePolymorphicTrigger]:
        return [
            CreatePolymorphicTrigger(
                self.table, action, self.columns, self.max_identifier_length
            )
            for action in (naming.INSERT, naming.UPDATE)
        ]

    def triggers(self) -> List[Any]:
        """DROP then CREATE statements for both triggers."""

        return self.drop_triggers() + self.create_triggers()

    def indexes(self) -> List[CreatePolymorphicIndex]:
        if self.unique_columns is None:
            return []
        return [
            CreatePolymorphicIndex(
                self.table,
                column,
                self.unique_columns,
                self.max_identifier_length,
            )
            for column in self.columns
        ]

    def foreign_keys(self) -> List[AddPolymorphicForeignKey]:
        missing = [col for col in self.columns if not self.targets[col]]
        if missing:
            raise sa_exc.ArgumentError(
                "No referenced table given for column(s) %s on table %r"
                % (", ".join(missing), self.table)
            )
        return [
            AddPolymorphicForeignKey(
                self.table,
                column,
                self.targets[column],
                self.max_identifier_length,
            )
            for column in self.columns
        ]

    def statements(self) -> List[Any]:
        """Triggers, then unique indexes, then foreign keys."""

        return self.triggers() + self.indexes() + self.foreign_keys()

    def emit(self, bind: Any, statements: Sequence[Any]) -> List[Any]:
        for stmt in statements:
            if self._should_log_info():  # type: ignore[attr-defined]
                self.logger.info(  # type: ignore[attr-defined]
                    "%s on table %s", stmt, self.table
                )
            bind.execute(stmt)
        return list(statements)


def polymorphic_triggers(
    table: Any,
    columns: Union[Mapping[str, str], Sequence[str]],
    max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
) -> List[Any]:
    """Return the DROP/CREATE trigger statements for ``columns``."""

    return PolymorphicConstraints(
        table, columns, max_identifier_length=max_identifier_length
    ).triggers()


def polymorphic_constraints(
    table: Any,
    columns: Mapping[str, str],
    unique: _UniqueArg = None,
    max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
) -> List[Any]:
    """Return trigger, unique index and foreign key statements."""

    return PolymorphicConstraints(
        table, columns, unique, max_identifier_length
    ).statements()


def add_polymorphic_triggers(
    bind: Any,
    table: Any,
    columns: Union[Mapping[str, str], Sequence[str]],
    max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
) -> List[Any]:
    """Create the triggers for ``columns``, replacing existing ones."""

    generator = PolymorphicConstraints(
        table, columns, max_identifier_length=max_identifier_length
    )
    return generator.emit(bind, generator.triggers())


def add_polymorphic_constraints(
    bind: Any,
    table: Any,
    columns: Mapping[str, str],
    unique: _UniqueArg = None,
    max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
) -> List[Any]:
    """Create the triggers, optional unique indexes and foreign keys."""

    generator = PolymorphicConstraints(
        table, columns, unique, max_identifier_length
    )
    return generator.emit(bind, generator.statements())


def drop_polymorphic_triggers(
    bind: Any,
    table: Any,
    columns: Union[Mapping[str, str], Sequence[str]],
    max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
) -> List[Any]:
    """Drop the triggers created by :func:`.add_polymorphic_triggers`."""

    generator = PolymorphicConstraints(
        table, columns, max_identifier_length=max_identifier_length
    )
    return generator.emit(bind, generator.drop_triggers())


def _coerce_table(table: Any) -> str:
    name = table_name(table)
    if not isinstance(name, str) or not name:
        raise sa_exc.ArgumentError("Table name required, got %r" % (table,))
    return name


def _coerce_columns(
    columns: Union[Mapping[str, str], Sequence[str]]
) -> Mapping[str, Optional[str]]:
    if isinstance(columns, collections_abc.Mapping):
        targets = {
            column_name(col): target for col, target in columns.items()
        }
    elif isinstance(columns, (str, bytes)) or not isinstance(
        columns, collections_abc.Iterable
    ):
        raise sa_exc.ArgumentError(
            "Expected a mapping or sequence of column names, got %r"
            % (columns,)
        )
    else:
        targets = {column_name(col): None for col in columns}

    if not targets:
        raise sa_exc.ArgumentError("At least one column is required")
    for col in targets:
        if not isinstance(col, str) or not col:
            raise sa_exc.ArgumentError("Invalid column name %r" % (col,))
    return targets


def _coerce_unique(unique: _UniqueArg) -> Optional[List[str]]:
    """``None`` means no unique indexes; a list (possibly empty) holds
    the extra columns of each index."""

    if unique is None or unique is False:
        return None
    elif unique is True:
        return []
    elif isinstance(unique, str):
        return [unique] if unique else None
    elif isinstance(unique, (list, tuple)):
        for col in unique:
            if not isinstance(column_name(col), str):
                raise sa_exc.ArgumentError(
                    "unique columns must be strings, got %r" % (col,)
                )
        return [column_name(col) for col in unique] or None
    else:
        raise sa_exc.ArgumentError(
            "unique must be a boolean, a column name or a sequence of "
            "column names, got %r" % (unique,)
        )


def _coerce_length(max_identifier_length: int) -> int:
    if (
        isinstance(max_identifier_length, bool)
        or not isinstance(max_identifier_length, int)
        or max_identifier_length <= 0
    ):
        raise sa_exc.ArgumentError(
            "max_identifier_length must be a positive integer, got %r"
            % (max_identifier_length,)
        )
    return max_identifier_length
