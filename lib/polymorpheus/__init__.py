# polymorpheus/__init__.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

from .exc import AmbiguousTypeError as AmbiguousTypeError
from .exc import InvalidTypeError as InvalidTypeError
from .exc import PolymorphicError as PolymorphicError
from .exc import PolymorphicValidationError as PolymorphicValidationError
from .interface import belongs_to_polymorphic as belongs_to_polymorphic
from .interface import is_valid as is_valid
from .interface import PolymorphicInterface as PolymorphicInterface
from .interface import validate as validate
from .interface import validate_on_flush as validate_on_flush
from .interface import validates_polymorph as validates_polymorph
from .migration import add_polymorphic_constraints as add_polymorphic_constraints  # noqa: E501
from .migration import add_polymorphic_triggers as add_polymorphic_triggers
from .migration import drop_polymorphic_triggers as drop_polymorphic_triggers
from .migration import PolymorphicConstraints as PolymorphicConstraints
from .migration import polymorphic_constraints as polymorphic_constraints
from .migration import polymorphic_triggers as polymorphic_triggers
from .reflection import get_polymorphic_triggers as get_polymorphic_triggers
from .reflection import get_triggers as get_triggers
from .reflection import Trigger as Trigger

__version__ = "3.0.0"
