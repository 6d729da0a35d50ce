from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from .model import RuleDoc, parse_rules
from ..utils.log import child_logger

log = child_logger("compile")


class ActionKind(str, Enum):
    REMOVE = "remove"
    DESCEND = "descend"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    child: "Ruler | None" = None

    @property
    def is_remove(self) -> bool:
        return self.kind is ActionKind.REMOVE


# Stateless; every removed name at every scope shares it
REMOVE = Action(ActionKind.REMOVE)


def descend(child: "Ruler") -> Action:
    return Action(ActionKind.DESCEND, child)


@dataclass(frozen=True)
class Ruler:
    """
    Compiled, read-only form of one RuleDoc scope.

                    Ruler
                      |
          ---------------------------
    field1|                   field2|
        REMOVE              descend(Ruler)
                                    |
                          ---------------------
               field2.sub1|        field2.sub2|
                  descend(Ruler)        REMOVE
                          |
                  ----------------
                 a|             b|
               REMOVE         REMOVE
    """
    actions: Mapping[str, Action]
    rule: RuleDoc = field(repr=False, compare=False)

    def get(self, name: str) -> Action | None:
        return self.actions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.actions

    def __iter__(self) -> Iterator[str]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def removed_names(self) -> frozenset[str]:
        return frozenset(n for n, a in self.actions.items() if a.is_remove)


def _compile(rule: RuleDoc, path: str) -> Ruler:
    actions: dict[str, Action] = {}
    for name, sub in rule.property_simplifiers.items():
        actions[name] = descend(_compile(sub, f"{path}.{name}" if path else name))
    # remove is terminal and wins over a descend declared for the same name
    for name in rule.remove_properties:
        if name in actions and not actions[name].is_remove:
            log.warning(
                "rule both removes and descends into a name; removal wins",
                extra={"scope": path or "<root>", "property": name},
            )
        actions[name] = REMOVE
    return Ruler(actions=MappingProxyType(actions), rule=rule)


def compile_rules(doc: Any) -> Ruler:
    """
    Compile a rule document (RuleDoc, mapping, JSON text, or Ruler) once into
    an immutable Ruler tree. Malformed documents raise ParseError.
    """
    if isinstance(doc, Ruler):
        return doc
    rule = parse_rules(doc)
    ruler = _compile(rule, "")
    log.debug("compiled rules", extra={"names": len(ruler)})
    return ruler
