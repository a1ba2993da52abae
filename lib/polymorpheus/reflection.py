# polymorpheus/reflection.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Read back polymorphic triggers from a MySQL database.

:func:`.get_polymorphic_triggers` lets a migration (or a schema dump)
recover the table and column sets whose triggers were created with
:func:`.add_polymorphic_triggers`, e.g. to drop them again::

    for table, columns in get_polymorphic_triggers(connection):
        drop_polymorphic_triggers(connection, table, columns)

"""

from __future__ import annotations

import re
from typing import Any
from typing import List
from typing import Sequence
from typing import Tuple

from sqlalchemy import text

from . import naming

_column_check = re.compile(r"IF\(NEW\.`?([^\s`]+)`? IS NULL")


class Trigger:
    """One row of MySQL's ``SHOW TRIGGERS``."""

    __slots__ = (
        "name",
        "event",
        "table",
        "statement",
        "timing",
        "created",
        "sql_mode",
        "definer",
        "charset",
        "collation_connection",
        "db_collation",
    )

    def __init__(self, row: Sequence[Any]) -> None:
        values = list(row) + [None] * (len(self.__slots__) - len(row))
        for attr, value in zip(self.__slots__, values):
            setattr(self, attr, value)

    @property
    def columns(self) -> List[str]:
        """Columns watched by a polymorphic trigger, in body order."""

        return _column_check.findall(self.statement or "")

    @property
    def is_polymorphic(self) -> bool:
        return any(
            self.name.startswith(token + "_")
            for token in naming.TRIGGER_TOKENS.values()
        )

    def __repr__(self) -> str:
        return "Trigger(%r, %r, %r)" % (self.name, self.timing, self.event)


def get_triggers(bind: Any) -> List[Trigger]:
    """Return every trigger of the current database."""

    return [Trigger(row) for row in bind.execute(text("SHOW TRIGGERS"))]


def get_polymorphic_triggers(bind: Any) -> List[Tuple[str, List[str]]]:
    """Return ``(table, columns)`` once per polymorphic trigger pair.

    The INSERT and UPDATE triggers of a pair watch the same columns, so
    they collapse into a single entry.

    """
    seen = set()
    result = []
    for trigger in get_triggers(bind):
        columns = trigger.columns
        if not trigger.is_polymorphic or not columns:
            continue
        key = (trigger.table, tuple(columns))
        if key not in seen:
            seen.add(key)
            result.append((trigger.table, columns))
    return result
