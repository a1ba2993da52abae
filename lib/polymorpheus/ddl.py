# polymorpheus/ddl.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""DDL constructs which enforce a polymorphic reference in the database.

Each construct is a :class:`sqlalchemy.schema.DDLElement`, compiled by the
:mod:`sqlalchemy.ext.compiler` extension, so it may be executed on a
:class:`~sqlalchemy.engine.Connection`, passed to Alembic's
``op.execute()``, or turned into a string::

    >>> from sqlalchemy.dialects import mysql
    >>> print(DropPolymorphicTrigger("pets", "INSERT", ["dog_id", "kitty_id"])
    ...       .compile(dialect=mysql.dialect()))
    DROP TRIGGER IF EXISTS pfki_pets_dogid_kittyid

The trigger syntax is MySQL's; other dialects render the same text.

"""

from __future__ import annotations

from typing import Any
from typing import Sequence

from sqlalchemy.ext.compiler import compiles
from sqlalchemy.schema import DDLElement

from . import naming
from .util import column_name
from .util import table_name


class _PolymorphicDDLElement(DDLElement):
    inherit_cache = False

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.name)


class _TriggerElement(_PolymorphicDDLElement):
    def __init__(
        self,
        table: Any,
        action: str,
        columns: Sequence[Any],
        max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
    ) -> None:
        self.table = table_name(table)
        self.action = action.upper()
        self.columns = sorted(column_name(col) for col in columns)
        self.name = naming.trigger_name(
            self.table, self.action, self.columns, max_identifier_length
        )


class DropPolymorphicTrigger(_TriggerElement):
    """Represent a ``DROP TRIGGER IF EXISTS`` statement for one of the
    two triggers guarding a set of columns."""


class CreatePolymorphicTrigger(_TriggerElement):
    """Represent a ``CREATE TRIGGER`` statement which rejects a row
    unless exactly one of the watched columns is non-NULL."""


class CreatePolymorphicIndex(_PolymorphicDDLElement):
    """Represent a ``CREATE UNIQUE INDEX`` over one polymorphic column
    and any number of additional columns."""

    def __init__(
        self,
        table: Any,
        column: Any,
        unique_columns: Sequence[Any] = (),
        max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
    ) -> None:
        self.table = table_name(table)
        self.column = column_name(column)
        self.unique_columns = [column_name(col) for col in unique_columns]
        self.name = naming.index_name(
            self.table,
            self.column,
            self.unique_columns,
            max_identifier_length,
        )


class AddPolymorphicForeignKey(_PolymorphicDDLElement):
    """Represent an ``ALTER TABLE .. ADD CONSTRAINT .. FOREIGN KEY``
    statement for one polymorphic column.

    ``target`` is ``"table.column"`` or just ``"table"``, in which case
    the referred column is ``id``.

    """

    def __init__(
        self,
        table: Any,
        column: Any,
        target: str,
        max_identifier_length: int = naming.MAX_IDENTIFIER_LENGTH,
    ) -> None:
        self.table = table_name(table)
        self.column = column_name(column)
        self.referred_table, self.referred_column = split_target(target)
        self.name = naming.foreign_key_name(
            self.table, self.column, max_identifier_length
        )


def split_target(target: str) -> tuple:
    referred_table, _, referred_column = str(target).partition(".")
    return referred_table, referred_column or "id"


@compiles(DropPolymorphicTrigger)
def _drop_trigger(element, compiler, **kw):
    return "DROP TRIGGER IF EXISTS %s" % compiler.preparer.quote(element.name)


@compiles(CreatePolymorphicTrigger)
def _create_trigger(element, compiler, **kw):
    preparer = compiler.preparer
    checks = " + ".join(
        "IF(NEW.%s IS NULL, 0, 1)" % preparer.quote(col)
        for col in element.columns
    )
    return (
        "CREATE TRIGGER %s BEFORE %s ON %s\n"
        "  FOR EACH ROW\n"
        "    BEGIN\n"
        "      IF(%s) <> 1 THEN\n"
        "        SET NEW = 'Error';\n"
        "      END IF;\n"
        "    END"
        % (
            preparer.quote(element.name),
            element.action,
            preparer.quote(element.table),
            checks,
        )
    )


@compiles(CreatePolymorphicIndex)
def _create_index(element, compiler, **kw):
    preparer = compiler.preparer
    return "CREATE UNIQUE INDEX %s ON %s (%s)" % (
        preparer.quote(element.name),
        preparer.quote(element.table),
        ", ".join(
            preparer.quote(col)
            for col in [element.column] + element.unique_columns
        ),
    )


@compiles(AddPolymorphicForeignKey)
def _add_foreign_key(element, compiler, **kw):
    quote = compiler.preparer.quote_identifier
    return (
        "ALTER TABLE %s ADD CONSTRAINT %s FOREIGN KEY (%s) REFERENCES %s(%s)"
        % (
            quote(element.table),
            quote(element.name),
            quote(element.column),
            quote(element.referred_table),
            element.referred_column,
        )
    )
