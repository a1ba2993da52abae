# polymorpheus/exc.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Exceptions used with Polymorpheus.

The base exception class is :exc:`.PolymorphicError`, itself a
:exc:`sqlalchemy.exc.InvalidRequestError`, so applications already
catching SQLAlchemy's errors around flush and attribute access will
catch these as well.

Malformed arguments passed to the DDL generator are reported with
:exc:`sqlalchemy.exc.ArgumentError`, as SQLAlchemy itself does for
construction time state errors.

"""

from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List
from typing import Sequence

from sqlalchemy import exc as sa_exc


class PolymorphicError(sa_exc.InvalidRequestError):
    """Generic error class for polymorphic interfaces."""


class InvalidTypeError(PolymorphicError):
    """Raised when an object assigned to a polymorphic interface
    matches none of the declared associations."""

    def __init__(self, *accepted_types: str) -> None:
        self.accepted_types = accepted_types
        super().__init__(
            "Invalid type. Must be one of {%s}" % ", ".join(accepted_types)
        )


class AmbiguousTypeError(PolymorphicError):
    """Raised when an object assigned to a polymorphic interface
    matches more than one declared association."""

    def __init__(self) -> None:
        super().__init__("Ambiguous polymorphic interface or object type")


class PolymorphicValidationError(PolymorphicError):
    """Raised by the flush hook installed with
    :func:`.validate_on_flush` when an instance fails validation.

    :func:`.validate` itself never raises; it only collects errors.

    """

    def __init__(self, instance: Any, errors: Dict[str, List[str]]) -> None:
        self.instance = instance
        self.errors = errors
        super().__init__(
            "%s is invalid: %s"
            % (
                type(instance).__name__,
                "; ".join(_flatten_messages(errors)),
            )
        )


def _flatten_messages(errors: Dict[str, List[str]]) -> Sequence[str]:
    return [
        msg if key == "base" else "%s %s" % (key, msg)
        for key, messages in errors.items()
        for msg in messages
    ]
