"""
Common utility functions and helpers.
"""
from typing import Iterator, List, Optional, Sequence, Tuple
import logging
import re

from papergen.config import settings
from papergen.models.document import Section

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
# Up to three digits so a leading year such as "[2020]" is kept
_REFERENCE_MARKER = re.compile(r"^\s*\[\d{1,3}\]\s*")
# Characters XML 1.0 forbids; tab, newline and carriage return are allowed
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

# Words Pixabay matches too loosely to be useful in an image query
_GENERIC_TERMS = frozenset({
    "professional", "presentation", "slide", "corporate", "business",
    "technical", "report", "document", "paper", "research", "academic",
    "conference", "thesis", "dissertation", "study", "analysis",
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "from", "as", "is", "was", "are", "were",
})


def walk_sections(
    body: Sequence[Section],
    max_depth: Optional[int] = None,
) -> Iterator[Tuple[Section, int, str]]:
    """
    Walk a section tree in document order without recursion.

    Args:
        body: Top-level sections
        max_depth: Number of levels to emit (default: settings.MAX_RENDER_DEPTH)

    Yields:
        ``(section, depth, outline_number)`` with depth 0 for top-level
        sections and outline numbers like ``"2.1.3"``
    """
    if max_depth is None:
        max_depth = settings.MAX_RENDER_DEPTH

    stack: List[Tuple[Section, int, str]] = [
        (section, 0, str(i)) for i, section in reversed(list(enumerate(body, start=1)))
    ]
    dropped = 0

    while stack:
        section, depth, number = stack.pop()
        if depth >= max_depth:
            dropped += count_sections([section])
            continue

        yield section, depth, number

        children = section.subsections
        for i in range(len(children), 0, -1):
            stack.append((children[i - 1], depth + 1, f"{number}.{i}"))

    if dropped:
        logger.warning(
            "walk_sections: dropped %d section(s) nested deeper than %d levels",
            dropped,
            max_depth,
        )


def count_sections(body: Sequence[Section]) -> int:
    """Count every node in a section tree, nested ones included."""
    total = 0
    pending = list(body)
    while pending:
        section = pending.pop()
        total += 1
        pending.extend(section.subsections)
    return total


def split_paragraphs(markup: str) -> List[str]:
    """
    Split body markup into paragraph blocks on blank lines.

    Args:
        markup: Section body text

    Returns:
        Non-empty, stripped blocks in order
    """
    if not markup:
        return []
    return [block.strip() for block in _PARAGRAPH_BREAK.split(markup) if block.strip()]


def bullet_text(line: str) -> Optional[str]:
    """Return the item text if *line* is a ``- `` or ``* `` bullet, else None."""
    stripped = line.strip()
    if stripped.startswith(("- ", "* ")):
        return stripped[2:].strip()
    return None


def split_bold_runs(text: str) -> List[Tuple[str, bool]]:
    """
    Split inline ``**bold**`` markup into ``(text, is_bold)`` runs.

    Unmatched asterisks are kept as literal text.
    """
    runs: List[Tuple[str, bool]] = []
    pos = 0
    for match in _BOLD.finditer(text):
        if match.start() > pos:
            runs.append((text[pos:match.start()], False))
        runs.append((match.group(1), True))
        pos = match.end()
    if pos < len(text):
        runs.append((text[pos:], False))
    return runs


def numbered_references(references: Sequence[str]) -> List[str]:
    """
    Number references as ``[n] text`` in input order.

    A marker the model already put in front of an entry (``"[3] ..."``) is
    replaced so entries are never numbered twice.
    """
    return [
        f"[{n}] {_REFERENCE_MARKER.sub('', ref, count=1)}"
        for n, ref in enumerate(references, start=1)
    ]


def extract_keywords(topic: str, max_words: int = 8) -> str:
    """
    Build an image search query from a document topic.

    Drops generic academic terms and short words, keeps the first
    *max_words* remaining words and appends ``technology``.

    Args:
        topic: Free-text topic or heading
        max_words: Number of words to keep

    Returns:
        Search query string
    """
    words = [
        word for word in topic.lower().split()
        if len(word) > 3 and word not in _GENERIC_TERMS
    ][:max_words]
    return " ".join(words + ["technology"])


def strip_control_chars(text: Optional[str]) -> str:
    """Drop control characters that XML-based formats (DOCX, PPTX) reject."""
    return _XML_ILLEGAL.sub("", text or "")


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
