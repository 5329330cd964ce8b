"""Text extraction for heterogeneous candidate documents.

A candidate document is either a raw string or a mapping with an optional
text-bearing field and arbitrary metadata. The text sent for scoring and
the text used for cache keys both come from ``extract_text``.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union

Document = Union[Mapping[str, Any], str]

CIRCULAR_MARKER = "[Circular]"


def is_present(value: Any) -> bool:
    """Return True unless the value is missing or falsy ("", 0, False, NaN).

    Containers count as present even when empty.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


@dataclass(frozen=True)
class TextFieldRule:
    """Take the document text from one named field when it is present."""

    field: str

    def applies(self, document: Mapping[str, Any]) -> bool:
        return is_present(document.get(self.field))

    def extract(self, document: Mapping[str, Any]) -> str:
        value = document[self.field]
        if isinstance(value, str):
            return value
        return serialize(value)


# Tried in order; the first rule that applies wins.
TEXT_FIELD_RULES: Sequence[TextFieldRule] = (
    TextFieldRule("pageContent"),
    TextFieldRule("page_content"),
    TextFieldRule("text"),
    TextFieldRule("content"),
    TextFieldRule("document"),
)


def _without_cycles(value: Any, ancestors: List[int]) -> Any:
    """Copy containers into JSON-safe form, replacing back-references."""
    if isinstance(value, Mapping):
        if id(value) in ancestors:
            return CIRCULAR_MARKER
        ancestors.append(id(value))
        copied: Dict[str, Any] = {
            str(key): _without_cycles(item, ancestors) for key, item in value.items()
        }
        ancestors.pop()
        return copied
    if isinstance(value, (list, tuple)):
        if id(value) in ancestors:
            return CIRCULAR_MARKER
        ancestors.append(id(value))
        items = [_without_cycles(item, ancestors) for item in value]
        ancestors.pop()
        return items
    return value


def serialize(value: Any) -> str:
    """Serialize any value to compact JSON without failing on cycles.

    ``None`` serializes to ``"null"``; objects JSON cannot encode fall back
    to ``str()``.
    """
    return json.dumps(
        _without_cycles(value, []),
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )


def extract_text(document: Any) -> str:
    """Return the text of a document for scoring.

    Strings are their own text. Mappings use the first present field from
    ``TEXT_FIELD_RULES``; a field holding a falsy value such as ``""`` is
    skipped as if absent. Anything else, including a mapping with no
    usable field, is serialized whole.
    """
    if isinstance(document, str):
        return document
    if isinstance(document, Mapping):
        for rule in TEXT_FIELD_RULES:
            if rule.applies(document):
                return rule.extract(document)
    return serialize(document)


def extract_texts(documents: Sequence[Document]) -> List[str]:
    """Extract the text of every document, preserving order."""
    return [extract_text(document) for document in documents]
