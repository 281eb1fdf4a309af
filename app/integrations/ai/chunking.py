"""Job description chunking.

Greedy packing of paragraphs into bounded-size chunks, falling back to
sentence-level packing for paragraphs that do not fit on their own. Sizes
are character counts. Chunks never overlap.
"""
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 500

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_PARAGRAPH_SEP = "\n\n"
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True)
class Chunk:
    text: str
    index: int


def _split_sentences(paragraph: str, max_chunk_size: int) -> tuple[list[str], str]:
    """Pack sentences of an oversized paragraph.

    Returns the completed sub-chunks and the trailing partial buffer, which
    seeds the next paragraph buffer.
    """
    completed: list[str] = []
    buf = ""
    for sentence in _SENTENCE_BREAK.split(paragraph):
        if len(buf) + len(sentence) + 1 <= max_chunk_size:
            buf += (" " if buf else "") + sentence
        else:
            if buf.strip():
                completed.append(buf.strip())
            # a single sentence longer than the limit is kept whole
            buf = sentence
    return completed, buf.strip()


def chunk_job_description(content: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> list[Chunk]:
    """Split job description text into ordered chunks.

    Args:
        content: Full document text
        max_chunk_size: Max characters per chunk. Only a single sentence
            longer than this can produce a larger chunk.

    Returns:
        Chunks with contiguous 0-based indices in emission order
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")

    texts: list[str] = []
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(content) if p.strip()]

    buf = ""
    for paragraph in paragraphs:
        sep = _PARAGRAPH_SEP if buf else ""
        if len(buf) + len(sep) + len(paragraph) <= max_chunk_size:
            buf += sep + paragraph
            continue

        if buf.strip():
            texts.append(buf.strip())

        if len(paragraph) > max_chunk_size:
            completed, buf = _split_sentences(paragraph, max_chunk_size)
            texts.extend(completed)
        else:
            buf = paragraph

    if buf.strip():
        texts.append(buf.strip())

    if not texts and content.strip():
        texts.append(content.strip())

    chunks = [Chunk(text=t, index=i) for i, t in enumerate(texts)]
    logger.debug("Chunked %d chars into %d chunks (max=%d)", len(content), len(chunks), max_chunk_size)
    return chunks
