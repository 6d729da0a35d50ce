from __future__ import annotations
from typing import Any, Dict, List, Mapping
import json

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)


class ParseError(ValueError):
    """A rule document does not have the remove_properties / property_simplifiers shape."""


class RuleDoc(BaseModel):
    """
    One scope of a rule tree:

        {
          "remove_properties": ["field1"],
          "property_simplifiers": {
            "field2": {
              "remove_properties": ["sub2"],
              "property_simplifiers": {"sub1": {"remove_properties": ["a", "b"]}}
            }
          }
        }

    clears root.field1, root.field2.sub2, root.field2.sub1.a and root.field2.sub1.b.
    """
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    remove_properties: List[str] = Field(default_factory=list)
    property_simplifiers: Dict[str, "RuleDoc"] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("property_simplifiers", "property_rules"),
    )

    # JSON null reads as "nothing at this scope"
    @field_validator("remove_properties", "property_simplifiers", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any, info):
        if v is None:
            return [] if info.field_name == "remove_properties" else {}
        return v

    def is_empty(self) -> bool:
        return not self.remove_properties and not self.property_simplifiers

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="python")


RuleDoc.model_rebuild()


def parse_rules(doc: Any) -> RuleDoc:
    """
    Normalize a rule document into a RuleDoc.

    Accepts a RuleDoc, a compiled Ruler (its source document is returned),
    a mapping, or JSON text (str/bytes). Anything else raises ParseError.
    """
    if isinstance(doc, RuleDoc):
        return doc
    rule = getattr(doc, "rule", None)
    if isinstance(rule, RuleDoc):
        return rule
    if isinstance(doc, (str, bytes, bytearray)):
        try:
            doc = json.loads(doc)
        except ValueError as e:
            raise ParseError(f"rule document is not valid JSON: {e}") from e
    if not isinstance(doc, Mapping):
        raise ParseError(f"rule document must be an object, got {type(doc).__name__}")
    try:
        return RuleDoc.model_validate(dict(doc))
    except ValidationError as e:
        raise ParseError(f"malformed rule document: {e}") from e
