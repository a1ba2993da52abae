# polymorpheus/util.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

from __future__ import annotations

import re
from typing import Any

_acronym = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_camel = re.compile(r"([a-z\d])([A-Z])")


def underscore(name: str) -> str:
    """Produce an 'uncamelized' name, e.g.
    'SomeTerm' -> 'some_term', 'HTTPRequest' -> 'http_request'."""

    name = _acronym.sub(r"\1_\2", name)
    name = _camel.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def type_tag(cls: type) -> str:
    """Return the type tag for a class, its underscored class name."""

    return underscore(cls.__name__)


def table_name(table: Any) -> str:
    """Accept a :class:`sqlalchemy.schema.Table` or a plain string."""

    return getattr(table, "name", table)


def column_name(column: Any) -> str:
    """Accept a :class:`sqlalchemy.schema.Column` or a plain string."""

    return getattr(column, "name", column)
