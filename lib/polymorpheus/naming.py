# polymorpheus/naming.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Establish trigger, index and foreign key naming conventions.

Every name produced here is a pure function of its arguments.  A later
migration which drops a trigger or index rebuilds its name from the same
table and column names, so the rules below must never change for a
given input.

Trigger and unique index names use a "fair share" rule: the room left
after the ``<token>_<table>_`` prefix is divided evenly between the
column components.  Each component loses its underscores, is lower
cased and is cut to one character less than its share::

    >>> trigger_name("pets", INSERT, ["kitty_id", "dog_id"])
    'pfki_pets_dogid_kittyid'

Foreign key names are ``<table>_<column>_fk``, trimmed only when they
exceed the identifier limit.

"""

from __future__ import annotations

from typing import List
from typing import Sequence

from sqlalchemy import exc as sa_exc

MAX_IDENTIFIER_LENGTH = 64
"""MySQL's limit on the length of trigger, index and constraint names."""

INSERT = "INSERT"
UPDATE = "UPDATE"

TRIGGER_TOKENS = {INSERT: "pfki", UPDATE: "pfku"}
INDEX_TOKEN = "pfk"
FOREIGN_KEY_SUFFIX = "fk"


def generate_name(
    token: str,
    table: str,
    components: Sequence[str],
    max_length: int = MAX_IDENTIFIER_LENGTH,
) -> str:
    """Compose ``<token>_<table>_<component>_<component>...`` within
    ``max_length`` characters."""

    if not components:
        raise sa_exc.ArgumentError(
            "At least one column is required to generate a name for "
            "table %r" % table
        )

    count = len(components)
    share = (max_length - len(token) - len(table) - 2) // count

    if share < 2:
        # the table name alone eats the budget; keep at least one
        # character per column
        room = max_length - len(token) - 2 - 2 * count
        if room < 1:
            raise sa_exc.ArgumentError(
                "Identifier limit of %d characters is too small for %d "
                "columns" % (max_length, count)
            )
        table = table[:room]
        share = (max_length - len(token) - len(table) - 2) // count

    prefix = ("%s_%s_" % (token, table)).lower()
    return prefix + "_".join(
        component.replace("_", "").lower()[: share - 1]
        for component in components
    )


def trigger_name(
    table: str,
    action: str,
    columns: Sequence[str],
    max_length: int = MAX_IDENTIFIER_LENGTH,
) -> str:
    """Name of the BEFORE INSERT or BEFORE UPDATE trigger guarding
    ``columns`` on ``table``.  Column order does not matter."""

    try:
        token = TRIGGER_TOKENS[action.upper()]
    except KeyError as err:
        raise sa_exc.ArgumentError(
            "Unknown trigger action %r; expected one of %s"
            % (action, ", ".join(sorted(TRIGGER_TOKENS)))
        ) from err
    return generate_name(token, table, sorted(columns), max_length)


def index_name(
    table: str,
    column: str,
    unique_columns: Sequence[str] = (),
    max_length: int = MAX_IDENTIFIER_LENGTH,
) -> str:
    """Name of the unique index over ``column`` plus ``unique_columns``."""

    return generate_name(
        INDEX_TOKEN, table, [column] + list(unique_columns), max_length
    )


def foreign_key_name(
    table: str, column: str, max_length: int = MAX_IDENTIFIER_LENGTH
) -> str:
    """Name of the foreign key constraint on ``table.column``."""

    name = "%s_%s_%s" % (table, column, FOREIGN_KEY_SUFFIX)
    if len(name) <= max_length:
        return name

    table, column = truncate_longest(
        [table, column], max_length - len(FOREIGN_KEY_SUFFIX) - 2
    )
    return "%s_%s_%s" % (table, column, FOREIGN_KEY_SUFFIX)


def truncate_longest(components: Sequence[str], budget: int) -> List[str]:
    """Trim the longest component, one character at a time, until the
    combined length is within ``budget``.

    Ties go to the earliest component.

    """
    if budget < len(components):
        raise sa_exc.ArgumentError(
            "Cannot fit %d name components into %d characters"
            % (len(components), budget)
        )

    lengths = [len(component) for component in components]
    while sum(lengths) > budget:
        longest = max(range(len(lengths)), key=lengths.__getitem__)
        lengths[longest] -= 1
    return [
        component[:length] for component, length in zip(components, lengths)
    ]
