# polymorpheus/log.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Logging control and utilities.

Control of logging for Polymorpheus is performed from the regular python
logging module.  The regular dotted module namespace is used, starting at
'polymorpheus'.  For class-level logging, the class name is appended.

E.g. to see every DDL statement handed to a migration's connection::

    import logging
    logging.getLogger('polymorpheus.migration').setLevel(logging.INFO)

"""

from __future__ import annotations

import logging
import sys
from typing import Type
from typing import TypeVar

_IT = TypeVar("_IT")

rootlogger = logging.getLogger("polymorpheus")
if rootlogger.level == logging.NOTSET:
    rootlogger.setLevel(logging.WARN)


def _add_default_handler(logger: logging.Logger) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
    logger.addHandler(handler)


_logged_classes = set()


def _qual_logger_name_for_cls(cls: type) -> str:
    return (
        getattr(cls, "_polymorpheus_logger_namespace", None)
        or cls.__module__ + "." + cls.__name__
    )


def class_logger(cls: Type[_IT]) -> Type[_IT]:
    logger = logging.getLogger(_qual_logger_name_for_cls(cls))
    cls._should_log_debug = lambda self: logger.isEnabledFor(  # type: ignore
        logging.DEBUG
    )
    cls._should_log_info = lambda self: logger.isEnabledFor(  # type: ignore
        logging.INFO
    )
    cls.logger = logger  # type: ignore
    _logged_classes.add(cls)
    return cls


def echo(level: int = logging.INFO) -> None:
    """Send Polymorpheus log output to stdout at the given level.

    A convenience for interactive sessions and migration scripts; it is
    the equivalent of attaching a ``StreamHandler`` to the
    ``polymorpheus`` logger.

    """
    if not rootlogger.handlers:
        _add_default_handler(rootlogger)
    rootlogger.setLevel(level)
