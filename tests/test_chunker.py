"""Tests for job description chunking."""
import re

import pytest

from app.integrations.ai.chunking import DEFAULT_MAX_CHUNK_SIZE, Chunk, chunk_job_description


# ═══════════════════════════════════════════════════════
# Paragraph packing
# ═══════════════════════════════════════════════════════


class TestParagraphPacking:
    def test_small_paragraphs_share_one_chunk(self):
        chunks = chunk_job_description("Para one.\n\nPara two.", max_chunk_size=100)
        assert chunks == [Chunk(text="Para one.\n\nPara two.", index=0)]

    def test_paragraphs_split_when_combined_too_long(self):
        a, b = "A" * 60, "B" * 60
        chunks = chunk_job_description(f"{a}\n\n{b}", max_chunk_size=100)
        assert [c.text for c in chunks] == [a, b]

    def test_paragraph_separator_counts_toward_limit(self):
        a, b = "A" * 50, "B" * 49
        chunks = chunk_job_description(f"{a}\n\n{b}", max_chunk_size=100)
        assert [c.text for c in chunks] == [a, b]

    def test_paragraphs_filling_limit_exactly_share_chunk(self):
        a, b = "A" * 50, "B" * 48
        chunks = chunk_job_description(f"{a}\n\n{b}", max_chunk_size=100)
        assert [len(c.text) for c in chunks] == [100]

    def test_blank_lines_with_whitespace_separate_paragraphs(self):
        chunks = chunk_job_description("First.\n   \nSecond.", max_chunk_size=10)
        assert [c.text for c in chunks] == ["First.", "Second."]

    def test_indices_are_contiguous(self):
        content = "\n\n".join(f"Paragraph number {i}." for i in range(12))
        chunks = chunk_job_description(content, max_chunk_size=40)
        assert [c.index for c in chunks] == list(range(len(chunks)))

    def test_default_max_size(self):
        content = "\n\n".join("word " * 20 for _ in range(20))
        chunks = chunk_job_description(content)
        assert all(len(c.text) <= DEFAULT_MAX_CHUNK_SIZE for c in chunks)


# ═══════════════════════════════════════════════════════
# Sentence fallback
# ═══════════════════════════════════════════════════════


class TestSentenceFallback:
    def test_oversized_paragraph_split_at_sentences(self):
        content = "First sentence here. Second sentence here. Third one."
        chunks = chunk_job_description(content, max_chunk_size=30)
        assert [c.text for c in chunks] == [
            "First sentence here.",
            "Second sentence here.",
            "Third one.",
        ]

    def test_trailing_sentences_seed_next_paragraph(self):
        content = "Alpha sentence one. Beta sentence two.\n\nShort."
        chunks = chunk_job_description(content, max_chunk_size=26)
        assert [c.text for c in chunks] == [
            "Alpha sentence one.",
            "Beta sentence two.\n\nShort.",
        ]

    def test_single_long_sentence_kept_whole(self):
        sentence = "x" * 50
        chunks = chunk_job_description(sentence, max_chunk_size=20)
        assert [c.text for c in chunks] == [sentence]

    def test_question_and_exclamation_end_sentences(self):
        content = "Do you like Python? We do! Apply today."
        chunks = chunk_job_description(content, max_chunk_size=20)
        assert [c.text for c in chunks] == ["Do you like Python?", "We do! Apply today."]

    def test_chunks_bounded_unless_single_sentence(self):
        content = " ".join(f"Sentence {i} is about the role." for i in range(40))
        chunks = chunk_job_description(content, max_chunk_size=80)
        assert len(chunks) > 1
        assert all(len(c.text) <= 80 for c in chunks)


# ═══════════════════════════════════════════════════════
# Edge cases
# ═══════════════════════════════════════════════════════


class TestChunkEdgeCases:
    @pytest.mark.parametrize("content", ["", "   ", "\n\n\n"])
    def test_empty_content_yields_no_chunks(self, content):
        assert chunk_job_description(content, max_chunk_size=100) == []

    def test_content_is_trimmed(self):
        chunks = chunk_job_description("\n\n  Only paragraph.  \n\n", max_chunk_size=100)
        assert [c.text for c in chunks] == ["Only paragraph."]

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_size_rejected(self, size):
        with pytest.raises(ValueError):
            chunk_job_description("text", max_chunk_size=size)


# ═══════════════════════════════════════════════════════
# Properties over mixed inputs
# ═══════════════════════════════════════════════════════

_MIXED_INPUTS = [
    "A" * 50 + "\n\n" + "B" * 49,
    "\n\n".join(f"Paragraph {i} describes duty number {i}." for i in range(15)),
    " ".join(f"Sentence {i} covers the role! Is it remote? Yes." for i in range(12))
    + "\n\nClosing line.\n\n"
    + "Short tail paragraph.",
    "Intro.\n\n" + "x" * 150 + "\n\nAfter the run. " + "y" * 90 + ". Done here.\n  \nLast.",
    "Requirements:\n- Python\n- SQL\n\n"
    + "We build data pipelines. We value tests. " * 6
    + "\n\n\n\nBenefits: remote work, flexible hours.",
]


def _squash(text: str) -> str:
    return re.sub(r"\s+", "", text)


def _single_sentence(text: str) -> bool:
    return "\n\n" not in text and len(re.split(r"(?<=[.!?])\s+", text)) == 1


class TestChunkProperties:
    @pytest.mark.parametrize("max_size", [40, 80, 120])
    @pytest.mark.parametrize("content", _MIXED_INPUTS)
    def test_chunks_cover_content_in_order(self, content, max_size):
        chunks = chunk_job_description(content, max_chunk_size=max_size)
        assert _squash("".join(c.text for c in chunks)) == _squash(content)

    @pytest.mark.parametrize("max_size", [40, 80, 120])
    @pytest.mark.parametrize("content", _MIXED_INPUTS)
    def test_deterministic(self, content, max_size):
        assert chunk_job_description(content, max_size) == chunk_job_description(content, max_size)

    @pytest.mark.parametrize("max_size", [40, 80, 100, 120])
    @pytest.mark.parametrize("content", _MIXED_INPUTS)
    def test_size_limit(self, content, max_size):
        for chunk in chunk_job_description(content, max_chunk_size=max_size):
            assert len(chunk.text) <= max_size or _single_sentence(chunk.text)
