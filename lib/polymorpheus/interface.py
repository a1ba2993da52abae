# polymorpheus/interface.py
# Copyright (C) 2012-2026 the Polymorpheus authors and contributors
#
# This module is part of Polymorpheus and is released under
# the MIT License: https://www.opensource.org/licenses/mit-license.php

"""Expose several mutually exclusive foreign keys as one attribute.

A ``pictures`` row belongs either to an employee or to a user; the table
has one nullable foreign key per possibility, and exactly one of them is
set.  The mapping declares the columns and relationships as usual, plus
a :func:`.belongs_to_polymorphic` attribute::

    from polymorpheus import belongs_to_polymorphic, validates_polymorph

    @validates_polymorph("imageable")
    class Picture(Base):
        __tablename__ = "pictures"

        id = Column(Integer, primary_key=True)
        employee_id = Column(ForeignKey("employees.id"))
        user_id = Column(ForeignKey("users.id"))

        employee = relationship("Employee")
        user = relationship("User")

        imageable = belongs_to_polymorphic("employee", "user")

Reading ``picture.imageable`` returns whichever related object is set.
Assigning ``picture.imageable = some_user`` sets ``user_id`` to
``some_user.id`` and clears ``employee_id``.  The association is chosen
from the class name of the assigned object, or the name of its immediate
superclass, converted to lower case with underscores; ``type_map`` adds
explicit entries for classes whose names differ from the association.

At the class level, ``Picture.imageable`` is the
:class:`.PolymorphicInterface` itself, which offers :meth:`~.types`,
:attr:`~.keys`, :meth:`~.active_key` and :meth:`~.query_condition`.

The database side of the same invariant is provided by
:func:`.add_polymorphic_constraints`.

"""

from __future__ import annotations

import collections
import itertools
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union

from sqlalchemy import event
from sqlalchemy import exc as sa_exc

from . import exc
from . import log
from .util import type_tag
from .util import underscore

_VALIDATORS = "__polymorphic_validators__"


@log.class_logger
class PolymorphicInterface:
    """A descriptor presenting a set of foreign keys as one reference.

    Instances are produced by :func:`.belongs_to_polymorphic`.

    """

    def __init__(
        self,
        associations: List[str],
        name: Optional[str] = None,
        type_map: Optional[Mapping[Union[type, str], str]] = None,
    ) -> None:
        if not associations:
            raise sa_exc.ArgumentError(
                "belongs_to_polymorphic() requires at least one association"
            )
        self.associations = tuple(str(a).lower() for a in associations)
        if len(set(self.associations)) != len(self.associations):
            raise sa_exc.ArgumentError(
                "Duplicate association names in %s" % (self.associations,)
            )

        self.keys = tuple("%s_id" % a for a in self.associations)
        self._association_for_key = dict(zip(self.keys, self.associations))
        self._key_for_association = dict(zip(self.associations, self.keys))
        self.type_map = self._build_type_map(type_map or {})
        self.name = name
        self.owner: Optional[type] = None

    def _build_type_map(
        self, explicit: Mapping[Union[type, str], str]
    ) -> Dict[str, str]:
        type_map = {
            association: association for association in self.associations
        }
        for key, association in explicit.items():
            association = association.lower()
            if association not in self._key_for_association:
                raise sa_exc.ArgumentError(
                    "type_map entry %r refers to undeclared association %r"
                    % (key, association)
                )
            tag = type_tag(key) if isinstance(key, type) else underscore(key)
            type_map[tag] = association
        return type_map

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name
        self.owner = owner

    def __get__(self, instance: Any, owner: Any) -> Any:
        if instance is None:
            return self
        return self.get(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        self.set(instance, value)

    def __repr__(self) -> str:
        return "%s(%r, associations=%r)" % (
            self.__class__.__name__,
            self.name,
            self.associations,
        )

    def types(self) -> List[str]:
        """Return the association names, in declaration order."""

        return list(self.associations)

    def active_key(self, instance: Any) -> Optional[str]:
        """Return the name of the one non-NULL foreign key.

        ``None`` is returned when no key is set, and also when more than
        one is; the latter is left for the database triggers to reject.

        """
        present = [
            key
            for key in self.keys
            if getattr(instance, key, None) is not None
        ]
        if len(present) == 1:
            return present[0]
        return None

    def query_condition(self, instance: Any) -> Optional[Dict[str, Any]]:
        """Return ``{active_key: value}``, suitable for
        :meth:`~sqlalchemy.orm.Query.filter_by`, or ``None``."""

        key = self.active_key(instance)
        if key is None:
            return None
        return {key: getattr(instance, key)}

    def get(self, instance: Any) -> Any:
        key = self.active_key(instance)
        if key is not None:
            return getattr(instance, self._association_for_key[key])

        # objects assigned to the relationships directly have no
        # foreign key value until flushed
        assigned = [
            obj
            for obj in (
                getattr(instance, association, None)
                for association in self.associations
            )
            if obj is not None
        ]
        if len(assigned) == 1:
            return assigned[0]
        return None

    def set(self, instance: Any, value: Any) -> None:
        association = self.association_for(value)
        cls = type(instance)
        for other, key in zip(self.associations, self.keys):
            target = value if other == association else None
            setattr(instance, key, target.id if target is not None else None)

            # pending instances don't lazy load many-to-ones, so the
            # relationship is kept in step with its foreign key
            if hasattr(cls, other):
                setattr(instance, other, target)

        if self._should_log_debug():  # type: ignore[attr-defined]
            self.logger.debug(  # type: ignore[attr-defined]
                "%s.%s set to %s %r",
                type(instance).__name__,
                self.name,
                association,
                value.id,
            )

    def association_for(self, value: Any) -> str:
        """Return the association an object is assigned through.

        The object's class is looked up first, then its immediate
        superclass.

        """
        cls = type(value)
        candidates = [cls] + list(cls.__bases__[:1])
        matches: List[str] = []
        for candidate in candidates:
            association = self.type_map.get(type_tag(candidate))
            if association is not None and association not in matches:
                matches.append(association)

        if not matches:
            raise exc.InvalidTypeError(*self.associations)
        elif len(matches) > 1:
            raise exc.AmbiguousTypeError()
        return matches[0]

    def validate(self, instance: Any, errors: Dict[str, List[str]]) -> None:
        """Add a base error to ``errors`` unless exactly one association
        is present."""

        if self.get(instance) is None:
            errors["base"].append(
                "You must specify exactly one of the following: {%s}"
                % ", ".join(self.associations)
            )


def belongs_to_polymorphic(
    *associations: str,
    name: Optional[str] = None,
    type_map: Optional[Mapping[Union[type, str], str]] = None,
) -> PolymorphicInterface:
    """Declare a polymorphic reference over ``<association>_id`` columns.

    :param \\*associations: names of the associations, e.g. ``"employee",
     "user"``; each needs a ``<name>_id`` column and a ``<name>``
     relationship on the class.

    :param name: name of the interface; defaults to the attribute name
     it is assigned to.

    :param type_map: extra ``{class or class name: association}`` entries
     used to pick the association for an assigned object.

    """
    return PolymorphicInterface(
        list(associations), name=name, type_map=type_map
    )


def validates_polymorph(*names: str):
    """Class decorator registering validation of the named polymorphic
    interfaces.

    Registered validators are run by :func:`.validate`.

    """
    if not names:
        raise sa_exc.ArgumentError("validates_polymorph() requires a name")

    def decorate(cls):
        registered = list(getattr(cls, _VALIDATORS, ()))
        for name in names:
            if not isinstance(getattr(cls, name, None), PolymorphicInterface):
                raise sa_exc.ArgumentError(
                    "%s has no polymorphic interface named %r"
                    % (cls.__name__, name)
                )
            if name not in registered:
                registered.append(name)
        setattr(cls, _VALIDATORS, tuple(registered))
        return cls

    return decorate


def validate(instance: Any) -> Dict[str, List[str]]:
    """Run the registered polymorphic validators against ``instance``.

    Returns a dictionary of error messages keyed on ``"base"``; an empty
    dictionary means the instance is valid.  Nothing is raised, leaving
    the decision whether to persist to the caller.

    """
    errors: Dict[str, List[str]] = collections.defaultdict(list)
    cls = type(instance)
    for name in getattr(cls, _VALIDATORS, ()):
        getattr(cls, name).validate(instance, errors)
    return dict(errors)


def is_valid(instance: Any) -> bool:
    return not validate(instance)


def validate_on_flush(target: Any) -> Any:
    """Refuse to flush new or modified instances which fail
    :func:`.validate`.

    ``target`` is anything accepting session events: a
    :class:`~sqlalchemy.orm.Session`, a :class:`~sqlalchemy.orm.sessionmaker`
    or the ``Session`` class itself.  A failing instance raises
    :exc:`.PolymorphicValidationError` from ``Session.flush()``.

    """
    event.listen(target, "before_flush", _validate_before_flush)
    return target


def _validate_before_flush(session, flush_context, instances):
    for instance in itertools.chain(session.new, session.dirty):
        errors = validate(instance)
        if errors:
            raise exc.PolymorphicValidationError(instance, errors)
