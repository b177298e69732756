"""Lookup accessors: getter, setter and checker for a foreign key into a lookup table.

build_lookup_accessors() returns the three functions for one relation;
add_lookup() attaches them to a target class as methods, e.g. for
User.permission_type_id -> PermissionType:

    add_lookup(User, "permission", "permission_type_id", "PermissionType", cache=cache)
    user.permission()             # "Administrator"
    user.set_permission("Reader") # user.permission_type_id = 3 (no DB write)
    user.is_permission("Reader")  # True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.core.constants import (
    CHECKER_PREFIX,
    DEFAULT_LOOKUP_FIELD_NAME,
    SETTER_PREFIX,
)
from lookupcolumn.domain.exceptions import AccessorConflictException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupAccessors:
    """The three accessors generated for one lookup relation.

    getter(instance) -> name
    setter(instance, new_name) -> None
    checker(instance, candidate) -> bool | None (None when the foreign key is None)
    """

    relation_name: str
    foreign_key: str
    lookup_table: str
    field_name: str
    getter_name: str
    setter_name: str
    checker_name: str
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]
    checker: Callable[[Any, Any], bool | None]

    @property
    def names(self) -> tuple[str, str, str]:
        return (self.getter_name, self.setter_name, self.checker_name)


def build_lookup_accessors(
    cache: LookupCache,
    relation_name: str,
    foreign_key: str,
    lookup_table: str,
    *,
    field_name: str = DEFAULT_LOOKUP_FIELD_NAME,
    name_accessor: str | None = None,
    name_setter: str | None = None,
    name_checker: str | None = None,
) -> LookupAccessors:
    """Build getter/setter/checker closures delegating to the cache.

    Args:
        cache: Cache used to translate between ids and names.
        relation_name: Base name of the accessors (e.g. 'permission').
        foreign_key: Attribute of the target instance holding the lookup id.
        lookup_table: Lookup table identifier (e.g. 'PermissionType').
        field_name: Column of the lookup table holding the names.
        name_accessor: Getter name; defaults to relation_name.
        name_setter: Setter name; defaults to set_<relation_name>.
        name_checker: Checker name; defaults to is_<relation_name>.

    Returns:
        LookupAccessors with the three closures and their names.
    """

    def fetch_id_by_name(name: Any) -> Hashable:
        return cache.fetch_id_by_name(lookup_table, field_name, name)

    def getter(instance: Any) -> Any:
        return cache.fetch_name_by_id(
            lookup_table, field_name, getattr(instance, foreign_key)
        )

    def setter(instance: Any, new_name: Any) -> None:
        setattr(instance, foreign_key, fetch_id_by_name(new_name))

    def checker(instance: Any, candidate: Any) -> bool | None:
        current_id = getattr(instance, foreign_key)
        if current_id is None:
            return None
        return fetch_id_by_name(candidate) == current_id

    return LookupAccessors(
        relation_name=relation_name,
        foreign_key=foreign_key,
        lookup_table=lookup_table,
        field_name=field_name,
        getter_name=name_accessor or relation_name,
        setter_name=name_setter or f"{SETTER_PREFIX}{relation_name}",
        checker_name=name_checker or f"{CHECKER_PREFIX}{relation_name}",
        getter=getter,
        setter=setter,
        checker=checker,
    )


def add_lookup(
    target_cls: type,
    relation_name: str,
    foreign_key: str,
    lookup_table: str,
    *,
    cache: LookupCache,
    field_name: str = DEFAULT_LOOKUP_FIELD_NAME,
    name_accessor: str | None = None,
    name_setter: str | None = None,
    name_checker: str | None = None,
) -> LookupAccessors:
    """Attach getter, setter and checker methods to target_cls.

    Fails before defining anything if one of the names already exists on
    the class (including inherited members and mapped columns) or if two
    of them are equal.

    Raises:
        AccessorConflictException: a generated name is already taken.
    """
    accessors = build_lookup_accessors(
        cache,
        relation_name,
        foreign_key,
        lookup_table,
        field_name=field_name,
        name_accessor=name_accessor,
        name_setter=name_setter,
        name_checker=name_checker,
    )
    seen: set[str] = set()
    for name in accessors.names:
        if name in seen or hasattr(target_cls, name):
            raise AccessorConflictException(target_cls.__name__, name)
        seen.add(name)

    for name, func in (
        (accessors.getter_name, accessors.getter),
        (accessors.setter_name, accessors.setter),
        (accessors.checker_name, accessors.checker),
    ):
        func.__name__ = name
        func.__qualname__ = f"{target_cls.__qualname__}.{name}"
        setattr(target_cls, name, func)

    logger.debug(
        "Added lookup accessors %s to %s (%s -> %s.%s)",
        ", ".join(accessors.names),
        target_cls.__name__,
        foreign_key,
        lookup_table,
        field_name,
    )
    return accessors
