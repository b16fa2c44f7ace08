"""
Content request builder.

Turns a GenerationRequest into the prompt, system instruction and output
token budget sent to the AI text service. Each document type has one
SchemaDescriptor naming the JSON shape the model must return; the same
descriptor is what the normalizer validates replies against.

Public API
----------
build(request)              -> BuiltRequest
descriptor_for(doc_type)    -> SchemaDescriptor
"""
from __future__ import annotations

import copy
import dataclasses
import json
from typing import Any, Dict, List, Tuple

from papergen.errors import InvalidRequest
from papergen.models.document import (
    Author,
    CitationStyle,
    DocumentType,
    GenerationRequest,
    Tone,
)


# ---------------------------------------------------------------------------
# Schema descriptors
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class SchemaDescriptor:
    """The JSON contract one document type is generated against."""

    document_type: DocumentType
    collection_key: str
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    node_fields: Tuple[str, ...]
    example: Dict[str, Any]
    max_tokens: int
    persona: str
    guidance: str
    default_tone: Tone
    default_citation: CitationStyle

    def example_json(self, include_images: bool = False) -> str:
        """Pretty-printed example shape, with ``imageQuery`` nodes when asked."""
        shape = copy.deepcopy(self.example)
        if include_images:
            for node in shape.get(self.collection_key, []):
                node.setdefault("imageQuery", "Short stock photo search phrase")
        return json.dumps(shape, indent=2)


@dataclasses.dataclass
class BuiltRequest:
    """Everything the AI text service needs for one generation call."""

    document_type: DocumentType
    prompt: str
    system_instruction: str
    response_contract: SchemaDescriptor
    max_tokens: int
    response_format: str = "json"


_REPORT = SchemaDescriptor(
    document_type=DocumentType.REPORT,
    collection_key="sections",
    required_fields=("title", "sections"),
    optional_fields=("abstract", "references"),
    node_fields=("title", "content", "subsections"),
    example={
        "title": "Report title",
        "abstract": "Brief summary",
        "sections": [
            {
                "title": "Section name",
                "content": "Section content with markdown formatting",
                "subsections": [],
            }
        ],
        "references": ["Reference 1", "Reference 2"],
    },
    max_tokens=16384,
    persona=(
        "You are an expert technical report writer. Generate a comprehensive "
        "BET-standard technical report in JSON format."
    ),
    guidance=(
        "Include sections: Introduction, Project Plan, Budget, Methodology, "
        "Results, Conclusion, References, and Appendix.\n"
        "Use proper academic tone and include Gantt chart data and budget tables."
    ),
    default_tone=Tone.ACADEMIC,
    default_citation=CitationStyle.AUTO,
)

_SLIDE_DECK = SchemaDescriptor(
    document_type=DocumentType.SLIDE_DECK,
    collection_key="slides",
    required_fields=("title", "slides"),
    optional_fields=(),
    node_fields=("type", "title", "content", "speakerNotes", "imageQuery"),
    example={
        "title": "Presentation title",
        "slides": [
            {
                "type": "title | content | image | quote",
                "title": "Slide title",
                "content": ["Bullet point 1", "Bullet point 2"],
                "speakerNotes": "What to say for this slide",
            }
        ],
    },
    max_tokens=16384,
    persona=(
        "You are an expert presentation designer. Generate a professional "
        "presentation following the 6x6 rule (max 6 bullet points, max 6-7 "
        "words per bullet)."
    ),
    guidance="Create engaging slides with clear structure. Include speaker notes for each slide.",
    default_tone=Tone.PROFESSIONAL,
    default_citation=CitationStyle.AUTO,
)

_PAPER = SchemaDescriptor(
    document_type=DocumentType.PAPER,
    collection_key="sections",
    required_fields=("title", "sections"),
    optional_fields=("authors", "abstract", "keywords", "references"),
    node_fields=("number", "title", "content", "subsections"),
    example={
        "title": "Paper title",
        "authors": ["Author 1", "Author 2"],
        "abstract": "Paper abstract",
        "keywords": ["keyword1", "keyword2"],
        "sections": [
            {
                "number": "I.",
                "title": "Section title",
                "content": "Section content with markdown",
                "subsections": [],
            }
        ],
        "references": ["[1] Reference format"],
    },
    max_tokens=32768,
    persona=(
        "You are an expert academic paper writer. Generate an IEEE-formatted "
        "conference paper with proper academic structure."
    ),
    guidance=(
        "Include: Abstract, Introduction, Related Work, Methodology, Results, "
        "Discussion, Conclusion, References."
    ),
    default_tone=Tone.ACADEMIC,
    default_citation=CitationStyle.IEEE,
)

_THESIS = SchemaDescriptor(
    document_type=DocumentType.THESIS,
    collection_key="chapters",
    required_fields=("title", "chapters"),
    optional_fields=("author", "abstract", "references"),
    node_fields=("number", "title", "content", "sections"),
    example={
        "title": "Thesis title",
        "author": "Author name",
        "abstract": "Thesis abstract",
        "chapters": [
            {
                "number": 1,
                "title": "Chapter title",
                "sections": [
                    {
                        "title": "Section title",
                        "content": "Section content with markdown",
                    }
                ],
            }
        ],
        "references": ["Author, A. (Year). Title. Journal..."],
    },
    max_tokens=65536,
    persona=(
        "You are an expert thesis writer. Generate a comprehensive "
        "thesis/dissertation with proper academic structure."
    ),
    guidance=(
        "Include: Title Page, Abstract, Table of Contents, Introduction, "
        "Literature Review, Methodology, Results, Discussion, Conclusion, "
        "References, Appendices."
    ),
    default_tone=Tone.ACADEMIC,
    default_citation=CitationStyle.HARVARD,
)

DESCRIPTORS: Dict[DocumentType, SchemaDescriptor] = {
    d.document_type: d for d in (_REPORT, _SLIDE_DECK, _PAPER, _THESIS)
}

# Opening line of the user prompt per type; formatted with length and topic
_PROMPT_LEADS: Dict[DocumentType, str] = {
    DocumentType.REPORT: "Generate a {length} technical report on: {topic}.",
    DocumentType.SLIDE_DECK: "Generate a {length} presentation on: {topic}.",
    DocumentType.PAPER: "Generate a {length} IEEE conference paper on: {topic}.",
    DocumentType.THESIS: "Generate a {length} thesis/dissertation on: {topic}.",
}

_PROMPT_CLOSERS: Dict[DocumentType, str] = {
    DocumentType.REPORT: "Include all standard BET report sections with proper formatting.",
    DocumentType.SLIDE_DECK: "Follow the 6x6 rule strictly.",
    DocumentType.PAPER: "Follow IEEE conference formatting.",
    DocumentType.THESIS: "Use author-date in-text citations.",
}

_NODE_NOUNS: Dict[DocumentType, str] = {
    DocumentType.REPORT: "section",
    DocumentType.SLIDE_DECK: "slide",
    DocumentType.PAPER: "section",
    DocumentType.THESIS: "chapter",
}


def descriptor_for(document_type: DocumentType) -> SchemaDescriptor:
    """Return the schema descriptor for *document_type*."""
    return DESCRIPTORS[DocumentType.parse(document_type)]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build(request: GenerationRequest) -> BuiltRequest:
    """
    Build the AI request for one generation.

    Raises:
        InvalidRequest: blank topic or missing/unknown document type
    """
    if request.document_type is None:
        raise InvalidRequest("Document type is required")
    descriptor = descriptor_for(request.document_type)

    topic = request.topic.strip()
    if not topic:
        raise InvalidRequest("Topic is required")

    tone = request.tone or descriptor.default_tone
    citation = request.citation_style or descriptor.default_citation

    return BuiltRequest(
        document_type=descriptor.document_type,
        prompt=_build_prompt(descriptor, request, topic, tone, citation),
        system_instruction=_build_system_instruction(
            descriptor, citation, request.include_images
        ),
        response_contract=descriptor,
        max_tokens=descriptor.max_tokens,
    )


def _build_system_instruction(
    descriptor: SchemaDescriptor,
    citation: CitationStyle,
    include_images: bool,
) -> str:
    parts = [descriptor.persona, descriptor.guidance]
    if descriptor.document_type in (DocumentType.PAPER, DocumentType.THESIS):
        parts.append(f"Use {citation.value} citation format.")
    parts.append(
        "Format the response as JSON with the following structure:\n"
        + descriptor.example_json(include_images)
    )
    parts.append("Respond with the JSON object only.")
    return "\n".join(parts)


def _build_prompt(
    descriptor: SchemaDescriptor,
    request: GenerationRequest,
    topic: str,
    tone: Tone,
    citation: CitationStyle,
) -> str:
    doc_type = descriptor.document_type
    lines: List[str] = [
        _PROMPT_LEADS[doc_type].format(length=request.length_hint, topic=topic),
        f"Writing tone: {tone.value}.",
        f"Citation style: {citation.value}.",
        _PROMPT_CLOSERS[doc_type],
    ]

    authors = _format_authors(request.authors)
    if authors:
        lines.append(
            "Use exactly these authors in the document's author fields, in this order: "
            + authors
        )

    if request.include_images:
        noun = _NODE_NOUNS[doc_type]
        lines.append(
            f'For each {noun}, add an "imageQuery" field with a 2-5 word '
            "stock photo search phrase that illustrates it."
        )

    prompt = "\n".join(lines)

    if request.extra_context and request.extra_context.strip():
        prompt += (
            "\n\nAdditional Context:\n"
            "----- BEGIN CONTEXT -----\n"
            f"{request.extra_context}\n"
            "----- END CONTEXT -----\n"
            "Use the additional context above as source material."
        )
    return prompt


def _format_authors(authors: List[Author]) -> str:
    rendered = []
    for author in authors:
        if not author.name.strip():
            continue
        details = ", ".join(p for p in (author.affiliation.strip(), author.email.strip()) if p)
        rendered.append(f"{author.name.strip()} ({details})" if details else author.name.strip())
    return "; ".join(rendered)
