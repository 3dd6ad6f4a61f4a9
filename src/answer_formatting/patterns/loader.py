"""Conversion between pattern definition documents and FormatPattern objects."""

import json
from importlib import resources
from pathlib import Path

from ..errors import PatternDefinitionError
from ..models import Constraint, FormatPattern, Rule, RuleKind, Section, SectionFormat, Severity

DEFAULT_PATTERNS_RESOURCE = "default_patterns.json"


def pattern_from_dict(data: dict) -> FormatPattern:
    """Build a FormatPattern from its JSON shape.

    Both the flat shape and the nested ``structure`` shape are accepted::

        {"id": ..., "name": ..., "keywords": [...], "priority": 8,
         "structure": {"sections": [...], "rules": [...], "template": "", "examples": []}}

    Args:
        data: Pattern definition

    Returns:
        Parsed pattern

    Raises:
        PatternDefinitionError: If the definition is malformed
    """
    if not isinstance(data, dict) or not data.get("id"):
        raise PatternDefinitionError(f"Pattern definition without an id: {data!r}")

    structure = data.get("structure", data)
    pattern_id = data["id"]
    try:
        sections = tuple(_section_from_dict(s) for s in structure.get("sections", []))
        rules = tuple(_rule_from_dict(r) for r in structure.get("rules", []))
        return FormatPattern(
            id=pattern_id,
            name=data.get("name", pattern_id),
            keywords=frozenset(k.lower().strip() for k in data.get("keywords", [])),
            priority=int(data.get("priority", 0)),
            sections=sections,
            rules=rules,
            template=structure.get("template", ""),
            examples=tuple(structure.get("examples", [])),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PatternDefinitionError(f"Invalid definition for pattern '{pattern_id}': {e}") from e


def _section_from_dict(data: dict) -> Section:
    return Section(
        name=data["name"],
        format=SectionFormat(data["format"]),
        required=bool(data.get("required", False)),
        constraints=tuple(
            Constraint(type=c["type"], value=_freeze(c.get("value", True)))
            for c in data.get("constraints", [])
        ),
    )


def _rule_from_dict(data: dict) -> Rule:
    kind = RuleKind(data["type"])
    if kind == RuleKind.CUSTOM:
        # Predicates are code and cannot come from a document
        raise ValueError(f"rule '{data['id']}' uses customPredicate, which requires code")
    return Rule(
        id=data["id"],
        kind=kind,
        description=data.get("description", ""),
        error_message=data.get("errorMessage", ""),
        severity=Severity(data.get("severity", "error")),
        value=data.get("value"),
        replacement=data.get("replacement"),
    )


def _freeze(value):
    return tuple(value) if isinstance(value, list) else value


def pattern_to_dict(pattern: FormatPattern) -> dict:
    """Serialize a pattern to its JSON shape.

    Custom predicate rules are omitted since they cannot be serialized.
    """
    return {
        "id": pattern.id,
        "name": pattern.name,
        "keywords": sorted(pattern.keywords),
        "priority": pattern.priority,
        "structure": {
            "sections": [
                {
                    "name": s.name,
                    "format": s.format.value,
                    "required": s.required,
                    "constraints": [
                        {"type": c.type, "value": list(c.value) if isinstance(c.value, tuple) else c.value}
                        for c in s.constraints
                    ],
                }
                for s in pattern.sections
            ],
            "rules": [
                {
                    "id": r.id,
                    "type": r.kind.value,
                    "description": r.description,
                    "errorMessage": r.error_message,
                    "severity": r.severity.value,
                    "value": r.value,
                    "replacement": r.replacement,
                }
                for r in pattern.rules
                if r.kind != RuleKind.CUSTOM
            ],
            "template": pattern.template,
            "examples": list(pattern.examples),
        },
    }


def patterns_from_json(text: str) -> list[FormatPattern]:
    """Parse a JSON document holding a pattern list or ``{"patterns": [...]}``."""
    data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("patterns", [])
    return [pattern_from_dict(p) for p in data]


def load_patterns_file(file_path: Path) -> list[FormatPattern]:
    """Load patterns from a JSON file.

    Args:
        file_path: Path to the patterns JSON file

    Returns:
        Parsed patterns
    """
    return patterns_from_json(file_path.read_text(encoding="utf-8"))


def load_default_patterns() -> list[FormatPattern]:
    """Load the bundled default patterns."""
    text = resources.files(__package__).joinpath(DEFAULT_PATTERNS_RESOURCE).read_text(encoding="utf-8")
    return patterns_from_json(text)
