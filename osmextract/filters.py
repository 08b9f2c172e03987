"""
Entity filters

Compiles the ID list and tag expressions given on the command line into
per-kind predicates the entity stream applies to each record.

Tag expressions are comma separated:
    key             key must be present
    key=value       key must equal value
    key=/regex/     value must match regex (anywhere in the value)
"""

import re
from dataclasses import dataclass
from typing import AbstractSet, Callable, Dict, Optional, Pattern, Set

from .errors import FilterCompileError, FilterParseError
from .models import EntityKind

Predicate = Callable[[object], bool]
TagsPredicate = Callable[[Dict[str, str]], bool]

ID_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


@dataclass(frozen=True, eq=False)
class EntityFilter:
    """
    A predicate bound to one entity kind
    
    Calling it with an entity of another kind raises TypeError, so a node
    filter can never be applied to ways by mistake. A filter without a
    predicate matches every entity of its kind.
    
    ids, when set, restricts the filter to those IDs. Readers check it on
    the raw record ID before building an entity.
    """
    kind: EntityKind
    predicate: Optional[Predicate] = None
    ids: Optional[AbstractSet[int]] = None
    
    @classmethod
    def match_all(cls, kind: EntityKind) -> "EntityFilter":
        return cls(kind)
    
    @property
    def is_match_all(self) -> bool:
        return self.predicate is None
    
    def accepts_id(self, entity_id: int) -> bool:
        """Cheap pre-check on a record ID"""
        return self.ids is None or entity_id in self.ids
    
    def __call__(self, entity) -> bool:
        if entity.kind is not self.kind:
            raise TypeError(
                f"{self.kind.value} filter applied to {entity.kind.value} {entity.id}"
            )
        return self.predicate is None or self.predicate(entity)


def parse_ids(ids_filter: str) -> Set[int]:
    """
    Parse a comma separated ID list
    
    Each token must be a plain signed decimal integer within the 64-bit ID
    range; whitespace, digit separators and non-ASCII digits are rejected.
    """
    ids = set()
    for token in ids_filter.split(","):
        if not ID_PATTERN.fullmatch(token):
            raise FilterParseError(f"{token!r}: invalid ID")
        entity_id = int(token)
        if not MIN_ID <= entity_id <= MAX_ID:
            raise FilterParseError(f"{token!r}: ID out of 64-bit range")
        ids.add(entity_id)
    return ids


def new_tags_predicate(tags_filter: str) -> Optional[TagsPredicate]:
    """Predicate over a tag mapping, or None for an empty expression"""
    if not tags_filter:
        return None
    
    required_keys: Set[str] = set()
    required_values: Dict[str, str] = {}
    required_regexps: Dict[str, Pattern] = {}
    
    for pair in tags_filter.split(","):
        key, found, value = pair.partition("=")
        if not found:
            required_keys.add(key)
        elif len(value) >= 2 and value[0] == "/" and value[-1] == "/":
            try:
                required_regexps[key] = re.compile(value[1:-1])
            except re.error as e:
                raise FilterCompileError(f"{pair!r}: {e}") from e
        else:
            required_values[key] = value
    
    def matches(tags: Dict[str, str]) -> bool:
        for key in required_keys:
            if key not in tags:
                return False
        for key, required_value in required_values.items():
            if tags.get(key) != required_value:
                return False
        for key, required_regexp in required_regexps.items():
            value = tags.get(key)
            if value is None or not required_regexp.search(value):
                return False
        return True
    
    return matches


def build_filter(kind: EntityKind, ids_filter: str = "", tags_filter: str = "") -> EntityFilter:
    """
    Build the filter for one entity kind
    
    Args:
        kind: Entity kind the filter applies to
        ids_filter: Comma separated IDs, empty for no ID constraint
        tags_filter: Comma separated tag expressions, empty for no tag constraint
        
    Returns:
        EntityFilter combining both constraints with AND; matches everything
        of that kind when both are empty
    """
    ids = parse_ids(ids_filter) if ids_filter else None
    tags_predicate = new_tags_predicate(tags_filter)
    
    if ids is None and tags_predicate is None:
        return EntityFilter.match_all(kind)
    if tags_predicate is None:
        return id_set_filter(kind, ids)
    if ids is None:
        return EntityFilter(kind, lambda entity: tags_predicate(entity.tags))
    return EntityFilter(
        kind,
        lambda entity: entity.id in ids and tags_predicate(entity.tags),
        ids
    )


def id_set_filter(kind: EntityKind, ids: AbstractSet[int]) -> EntityFilter:
    """Filter matching entities whose ID is in an accumulated ID set"""
    return EntityFilter(kind, lambda entity: entity.id in ids, ids)
