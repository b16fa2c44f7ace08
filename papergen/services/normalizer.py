"""
AI response normalizer.

Converts the raw text returned by the AI text service into a
CanonicalDocument. This is the only place that looks at the per-type JSON
shapes; every exporter downstream sees the canonical tree.

Parsing is strict first, then one bounded recovery pass for the usual
model habits (Markdown code fences, prose around the object, trailing
commas). Anything still unparseable raises MalformedResponse.
"""
from __future__ import annotations

import collections
import json
import logging
import re
from typing import Any, Deque, Dict, List, Optional, Tuple

from papergen.errors import MalformedResponse
from papergen.models.document import (
    CanonicalDocument,
    DocumentType,
    Section,
    SlideKind,
)
from papergen.services.request_builder import descriptor_for
from papergen.utils.helpers import strip_control_chars, truncate_text

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Document"

# Node kinds driving the shape mapping
_SECTION = "section"
_PAPER_SECTION = "paper_section"
_CHAPTER = "chapter"
_SLIDE = "slide"

_TOP_LEVEL_KIND: Dict[DocumentType, str] = {
    DocumentType.REPORT: _SECTION,
    DocumentType.SLIDE_DECK: _SLIDE,
    DocumentType.PAPER: _PAPER_SECTION,
    DocumentType.THESIS: _CHAPTER,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize(raw: Optional[str], document_type: DocumentType, topic: str = "") -> CanonicalDocument:
    """
    Parse and map an AI reply onto the canonical document model.

    Args:
        raw: Text returned by the AI service
        document_type: Type the request was built for
        topic: Original request topic, used when the reply has no title

    Returns:
        CanonicalDocument

    Raises:
        MalformedResponse: empty, unparseable, non-object or wrongly shaped reply
    """
    document_type = DocumentType.parse(document_type)
    data = _to_object(parse_json_lenient(raw))

    collection_key = descriptor_for(document_type).collection_key
    nodes = data.get(collection_key)
    if nodes is None:
        logger.warning("normalize: reply has no %r collection, body left empty", collection_key)
        nodes = []
    elif not isinstance(nodes, list):
        raise MalformedResponse(
            f"Expected {collection_key!r} to be a list, got {type(nodes).__name__}",
            reason="invalid_shape",
        )

    title = _text(data.get("title")) or topic.strip() or UNTITLED

    document = CanonicalDocument(
        document_type=document_type,
        title=title,
        author_line=_author_line(data),
        abstract=_text(data.get("abstract")) or None,
        keywords=_coerce_str_list(data.get("keywords")),
        body=_map_nodes(nodes, _TOP_LEVEL_KIND[document_type]),
        references=_coerce_str_list(data.get("references")),
    )
    logger.info(
        "normalize: %s %r with %d top-level node(s), %d reference(s)",
        document_type.value,
        document.title,
        len(document.body),
        len(document.references),
    )
    return document


def parse_json_lenient(raw: Optional[str]) -> Any:
    """
    Parse JSON from potentially messy model output.

    Tries a strict parse, then strips code fences, isolates the first
    balanced ``{...}`` block and drops trailing commas.

    Raises:
        MalformedResponse: reason ``"empty"`` or ``"unparseable"``
    """
    if raw is None or not raw.strip():
        raise MalformedResponse("AI service returned an empty response", reason="empty")

    text = raw.strip()
    ok, value = _try_json(text)
    if ok:
        return value

    stripped = _strip_code_fences(text)
    candidates = [stripped, _drop_trailing_commas(stripped)]
    fragment = _extract_json_object(stripped)
    if fragment:
        candidates += [fragment, _drop_trailing_commas(fragment)]

    for candidate in candidates:
        ok, value = _try_json(candidate)
        if ok:
            logger.debug("parse_json_lenient: recovered JSON from %d chars of output", len(raw))
            return value

    logger.warning("parse_json_lenient: no parseable JSON. Preview: %s", truncate_text(raw, 400))
    raise MalformedResponse("AI response is not valid JSON", reason="unparseable")


# ---------------------------------------------------------------------------
# JSON recovery
# ---------------------------------------------------------------------------

def _try_json(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


def _strip_code_fences(text: str) -> str:
    """Remove ```json / ``` delimiters that models often wrap output in."""
    text = re.sub(r"^```(?:json|javascript|text)?\s*\n?", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\n?```\s*$", "", text)
    return text.strip()


def _drop_trailing_commas(text: str) -> str:
    return re.sub(r",(\s*[}\]])", r"\1", text)


def _extract_json_object(text: str) -> str:
    """
    Find the first complete balanced ``{ ... }`` structure in *text*.
    Returns the matched fragment, or empty string if not found.
    """
    start = text.find("{")
    if start == -1:
        return ""

    depth = 0
    in_string = False
    escape_next = False

    for i, ch in enumerate(text[start:], start=start):
        if escape_next:
            escape_next = False
            continue
        if ch == "\\" and in_string:
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return ""


def _to_object(value: Any) -> Dict[str, Any]:
    if isinstance(value, list) and len(value) == 1 and isinstance(value[0], dict):
        value = value[0]
    if not isinstance(value, dict):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(value).__name__}",
            reason="not_an_object",
        )
    return value


# ---------------------------------------------------------------------------
# Shape mapping
# ---------------------------------------------------------------------------

def _map_nodes(nodes: List[Any], kind: str) -> List[Section]:
    """
    Map raw AI nodes to Sections breadth-first with an explicit queue.

    Siblings are queued together, so each parent's children keep their
    input order.
    """
    body: List[Section] = []
    queue: Deque[Tuple[Any, List[Section], str, int]] = collections.deque(
        (node, body, kind, position) for position, node in enumerate(nodes, start=1)
    )

    while queue:
        node, siblings, node_kind, position = queue.popleft()
        if not isinstance(node, dict):
            logger.warning(
                "normalize: skipping non-object %s node (%s)", node_kind, type(node).__name__
            )
            continue

        section, children, child_kind = _map_node(node, node_kind, position)
        siblings.append(section)
        for child_position, child in enumerate(children, start=1):
            queue.append((child, section.subsections, child_kind, child_position))

    return body


def _map_node(node: Dict[str, Any], kind: str, position: int) -> Tuple[Section, List[Any], str]:
    """Return the Section for one node plus its raw children and their kind."""
    heading = _text(node.get("title") or node.get("heading"))
    image_query = _text(node.get("imageQuery")) or None

    if kind == _SLIDE:
        content = node.get("content", node.get("bullets"))
        section = Section(
            heading=heading,
            body_markup=_body(content),
            speaker_notes=_text(node.get("speakerNotes") or node.get("notes")) or None,
            slide_kind=_slide_kind(node.get("type")),
            image_query=image_query,
        )
        return section, [], _SLIDE

    if kind == _CHAPTER:
        number = _text(node.get("number")) or str(position)
        section = Section(
            heading=heading,
            body_markup=_body(node.get("content")),
            label=f"Chapter {number}",
            image_query=image_query,
        )
        return section, _children(node, "sections"), _SECTION

    label = None
    if kind == _PAPER_SECTION:
        label = _text(node.get("number")) or None
    section = Section(
        heading=heading,
        body_markup=_body(node.get("content")),
        label=label,
        image_query=image_query,
    )
    return section, _children(node, "subsections"), kind


def _children(node: Dict[str, Any], key: str) -> List[Any]:
    value = node.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("normalize: ignoring non-list %r on node %r", key, node.get("title"))
        return []
    return value


def _slide_kind(value: Any) -> SlideKind:
    try:
        return SlideKind(_text(value).lower())
    except ValueError:
        return SlideKind.CONTENT


def _body(value: Any) -> str:
    """Section content as markup; bullet lists become ``- item`` lines."""
    if isinstance(value, list):
        return "\n".join(f"- {_text(item)}" for item in value if _text(item))
    return _text(value)


def _author_line(data: Dict[str, Any]) -> Optional[str]:
    authors = data.get("authors")
    if isinstance(authors, list):
        names = []
        for author in authors:
            name = _text(author.get("name")) if isinstance(author, dict) else _text(author)
            if name:
                names.append(name)
        return ", ".join(names) or None
    return _text(data.get("author") if authors is None else authors) or None


def _coerce_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [text for text in (_text(item) for item in value) if text]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return strip_control_chars(value).strip()
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)
