"""Tests for the content request builder."""
import json

import pytest

from papergen.errors import InvalidRequest
from papergen.models.document import (
    Author,
    CitationStyle,
    DocumentType,
    GenerationRequest,
)
from papergen.services.request_builder import DESCRIPTORS, build, descriptor_for


def _request(**kwargs) -> GenerationRequest:
    kwargs.setdefault("document_type", DocumentType.REPORT)
    kwargs.setdefault("topic", "Quantum Computing Applications")
    return GenerationRequest(**kwargs)


@pytest.mark.parametrize("doc_type", list(DocumentType))
def test_prompt_contains_topic_verbatim(doc_type):
    topic = "  Zero Trust <Security> & \"Architecture\"  "
    built = build(_request(document_type=doc_type, topic=topic))
    assert built.prompt
    assert topic.strip() in built.prompt
    assert built.response_format == "json"


@pytest.mark.parametrize(
    "doc_type,tokens,key",
    [
        (DocumentType.REPORT, 16384, "sections"),
        (DocumentType.SLIDE_DECK, 16384, "slides"),
        (DocumentType.PAPER, 32768, "sections"),
        (DocumentType.THESIS, 65536, "chapters"),
    ],
)
def test_token_budget_and_collection_key(doc_type, tokens, key):
    built = build(_request(document_type=doc_type))
    assert built.max_tokens == tokens
    assert built.response_contract.collection_key == key


def test_system_instruction_embeds_exact_shape():
    built = build(_request(document_type=DocumentType.THESIS))
    shape = DESCRIPTORS[DocumentType.THESIS].example_json()
    assert shape in built.system_instruction
    assert json.loads(shape)["chapters"][0]["number"] == 1


def test_defaults_per_document_type():
    deck = build(_request(document_type=DocumentType.SLIDE_DECK))
    assert "Writing tone: professional." in deck.prompt
    assert "Citation style: auto." in deck.prompt

    paper = build(_request(document_type=DocumentType.PAPER))
    assert "Writing tone: academic." in paper.prompt
    assert "Citation style: ieee." in paper.prompt
    assert "Use ieee citation format." in paper.system_instruction

    thesis = build(_request(document_type=DocumentType.THESIS))
    assert "Citation style: harvard." in thesis.prompt


def test_auto_citation_is_passed_through_verbatim():
    built = build(_request(document_type=DocumentType.PAPER, citation_style=CitationStyle.AUTO))
    assert "Citation style: auto." in built.prompt
    assert "Use auto citation format." in built.system_instruction


def test_length_hint_aliases():
    request = GenerationRequest.model_validate(
        {"documentType": "powerpoint", "topic": "5G Networks", "slideCount": "10-12 slides"}
    )
    assert request.document_type == DocumentType.SLIDE_DECK
    assert "Generate a 10-12 slides presentation on: 5G Networks." in build(request).prompt


def test_blank_length_hint_becomes_auto():
    request = GenerationRequest.model_validate(
        {"documentType": "report", "topic": "Robotics", "targetLength": ""}
    )
    assert request.length_hint == "auto"


def test_authors_are_listed_in_order():
    built = build(_request(authors=[
        Author(name="Ada Lovelace", affiliation="Analytical Society"),
        Author(name="  "),
        Author(name="Alan Turing", email="alan@example.com"),
    ]))
    assert "Ada Lovelace (Analytical Society); Alan Turing (alan@example.com)" in built.prompt


def test_extra_context_is_included_untruncated():
    context = "x" * 50_000 + " END-MARKER"
    built = build(_request(extra_context=context))
    assert "Additional Context:" in built.prompt
    assert context in built.prompt


def test_blank_extra_context_is_omitted():
    built = build(_request(extra_context="   \n "))
    assert "Additional Context:" not in built.prompt


def test_include_images_asks_for_image_queries():
    built = build(_request(document_type=DocumentType.SLIDE_DECK, include_images=True))
    assert "imageQuery" in built.prompt
    assert "imageQuery" in built.system_instruction

    plain = build(_request(document_type=DocumentType.SLIDE_DECK))
    assert "imageQuery" not in plain.system_instruction


@pytest.mark.parametrize("topic", ["", "   ", "\n\t"])
def test_blank_topic_is_rejected(topic):
    with pytest.raises(InvalidRequest):
        build(_request(topic=topic))


def test_missing_document_type_is_rejected():
    with pytest.raises(InvalidRequest):
        build(GenerationRequest(topic="Robotics"))


def test_unknown_document_type_is_rejected():
    with pytest.raises(InvalidRequest):
        descriptor_for("newsletter")
