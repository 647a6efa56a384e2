"""
Tests for the text diff engine.
"""

import pytest

from textcompare.core.diff.text_diff import (
    TextDiffEngine,
    char_similarity,
    classify,
    compare,
    inline_diff,
    merge_pieces,
    normalize,
    tokenize,
)
from textcompare.core.models import (
    AddedRow,
    ComparisonOptions,
    DiffRowType,
    EqualRow,
    ModifiedRow,
    PairClassification,
    RemovedRow,
    Span,
    SpanClass,
)


def assert_no_adjacent_same_class(spans):
    for first, second in zip(spans, spans[1:]):
        assert first.span_class != second.span_class


class TestNormalize:
    """Tests for the line normalizer."""

    def test_default_is_identity(self, default_options):
        assert normalize("  Mixed Case\t", default_options) == "  Mixed Case\t"

    def test_ignore_whitespace_removes_all_whitespace(self, ignore_whitespace_options):
        assert normalize(" a  b\tc  ", ignore_whitespace_options) == "abc"

    def test_ignore_case(self, ignore_case_options):
        assert normalize("HeLLo", ignore_case_options) == "hello"

    def test_both_options(self):
        options = ComparisonOptions(ignore_case=True, ignore_whitespace=True)
        assert normalize(" A B ", options) == "ab"

    def test_empty_string(self, default_options, ignore_whitespace_options):
        assert normalize("", default_options) == ""
        assert normalize("", ignore_whitespace_options) == ""


class TestTokenize:
    """Tests for word-boundary tokenization."""

    def test_words_and_spaces(self):
        assert tokenize("hello world") == ["hello", " ", "world"]

    def test_punctuation_runs(self):
        assert tokenize("f(x, y);") == ["f", "(", "x", ",", " ", "y", ");"]

    def test_tokens_reconstruct_text(self):
        text = "  return a.b(c) +  d;\t# note"
        assert "".join(tokenize(text)) == text

    def test_empty(self):
        assert tokenize("") == []


class TestSimilarity:
    """Tests for char_similarity and classify."""

    def test_both_empty_is_one(self, default_options):
        assert char_similarity("", "", default_options) == 1.0

    def test_disjoint_is_zero(self, default_options):
        assert char_similarity("foo", "bar", default_options) == 0.0

    def test_divides_by_longer_length(self, default_options):
        assert char_similarity("ab", "abcd", default_options) == pytest.approx(0.5)

    def test_case_folding(self, ignore_case_options, default_options):
        assert char_similarity("ABC", "abc", ignore_case_options) == 1.0
        assert char_similarity("ABC", "abc", default_options) == 0.0

    def test_whitespace_is_not_stripped(self, ignore_whitespace_options):
        assert char_similarity("a b", "ab", ignore_whitespace_options) == pytest.approx(2 / 3)

    def test_classify_threshold(self, default_options):
        assert classify("hello world", "hello there", default_options) == PairClassification.MODIFIED
        assert classify("foo", "bar", default_options) == PairClassification.SPLIT

    def test_threshold_is_strict(self):
        # "ab" vs "ac" has similarity exactly 0.5
        assert classify("ab", "ac", ComparisonOptions(similarity_threshold=0.5)) == PairClassification.SPLIT
        assert classify("ab", "ac", ComparisonOptions(similarity_threshold=0.49)) == PairClassification.MODIFIED

    def test_case_folding_that_changes_length_stays_in_range(self, ignore_case_options):
        # "İ" lower-cases to two code points
        similarity = char_similarity("İİ", "İİx", ignore_case_options)
        assert 0.0 <= similarity <= 1.0
        assert similarity == pytest.approx(4 / 5)


class TestMergePieces:
    """Tests for span merging."""

    def test_adjacent_same_class_merged(self):
        spans = merge_pieces([
            ("a", SpanClass.EQUAL),
            ("b", SpanClass.EQUAL),
            ("c", SpanClass.REMOVED),
            ("d", SpanClass.REMOVED),
            ("e", SpanClass.EQUAL),
        ])
        assert spans == (
            Span("ab", SpanClass.EQUAL),
            Span("cd", SpanClass.REMOVED),
            Span("e", SpanClass.EQUAL),
        )

    def test_empty(self):
        assert merge_pieces([]) == ()


class TestInlineDiff:
    """Tests for intraline spans."""

    def test_token_path(self, default_options):
        left, right = inline_diff("hello world", "hello there", default_options)
        assert left == (Span("hello ", SpanClass.EQUAL), Span("world", SpanClass.REMOVED))
        assert right == (Span("hello ", SpanClass.EQUAL), Span("there", SpanClass.ADDED))

    def test_single_word_in_middle(self, default_options):
        left, right = inline_diff("the quick brown fox", "the quick red fox", default_options)
        assert left == (
            Span("the quick ", SpanClass.EQUAL),
            Span("brown", SpanClass.REMOVED),
            Span(" fox", SpanClass.EQUAL),
        )
        assert right == (
            Span("the quick ", SpanClass.EQUAL),
            Span("red", SpanClass.ADDED),
            Span(" fox", SpanClass.EQUAL),
        )

    def test_character_fallback_for_short_lines(self, default_options):
        left, right = inline_diff("a", "b", default_options)
        assert left == (Span("a", SpanClass.REMOVED),)
        assert right == (Span("b", SpanClass.ADDED),)

    def test_character_fallback_when_one_side_short(self, default_options):
        left, right = inline_diff("color", "colour is", default_options)
        assert "".join(s.text for s in left) == "color"
        assert "".join(s.text for s in right) == "colour is"
        equal_left = "".join(s.text for s in left if s.span_class == SpanClass.EQUAL)
        assert equal_left == "color"
        assert_no_adjacent_same_class(left)
        assert_no_adjacent_same_class(right)

    def test_min_tokens_forces_character_path(self):
        options = ComparisonOptions(min_tokens=4)
        left, right = inline_diff("hello world", "hello there", options)
        assert len(left) > 2
        equal_left = sum(len(s.text) for s in left if s.span_class == SpanClass.EQUAL)
        equal_right = sum(len(s.text) for s in right if s.span_class == SpanClass.EQUAL)
        assert equal_left == equal_right == 7

    def test_ignore_case_tokens(self, ignore_case_options):
        left, right = inline_diff("Hello Big World", "hello small world", ignore_case_options)
        assert left[0] == Span("Hello ", SpanClass.EQUAL)
        assert right[0] == Span("hello ", SpanClass.EQUAL)
        assert Span("Big", SpanClass.REMOVED) in left
        assert Span("small", SpanClass.ADDED) in right

    def test_sides_only_report_their_own_changes(self, sample_texts, default_options):
        for left_text, right_text in sample_texts:
            left, right = inline_diff(left_text, right_text, default_options)
            assert {s.span_class for s in left} <= {SpanClass.EQUAL, SpanClass.REMOVED}
            assert {s.span_class for s in right} <= {SpanClass.EQUAL, SpanClass.ADDED}
            assert "".join(s.text for s in left) == left_text
            assert "".join(s.text for s in right) == right_text
            assert_no_adjacent_same_class(left)
            assert_no_adjacent_same_class(right)


class TestCompare:
    """Tests for the full comparison."""

    def test_two_empty_texts_give_one_equal_row(self):
        result = compare("", "")
        assert result.rows == (EqualRow(0, 1, 1, "", ""),)
        assert result.counts.equal == 1
        assert result.changed_row_indices == ()
        assert result.is_identical

    def test_self_equality(self, sample_texts):
        for text, _ in sample_texts:
            result = compare(text, text)
            assert all(row.row_type == DiffRowType.EQUAL for row in result.rows)
            assert result.counts.added == 0
            assert result.counts.removed == 0
            assert result.counts.modified == 0
            assert result.counts.equal == len(text.split("\n"))

    def test_ignore_whitespace(self, ignore_whitespace_options):
        result = compare("a  b", "ab", ignore_whitespace_options)
        assert result.rows == (EqualRow(0, 1, 1, "a  b", "ab"),)

    def test_ignore_case(self, ignore_case_options):
        result = compare("Hello", "hello", ignore_case_options)
        assert result.rows == (EqualRow(0, 1, 1, "Hello", "hello"),)

    def test_unrelated_lines_split(self):
        result = compare("foo", "bar")
        assert result.rows == (
            AddedRow(index=0, right_line_number=1, right_content="bar"),
            RemovedRow(index=1, left_line_number=1, left_content="foo"),
        )
        assert result.counts.added == 1
        assert result.counts.removed == 1
        assert result.counts.modified == 0
        assert result.changed_row_indices == (0, 1)

    def test_related_lines_modified(self):
        result = compare("hello world", "hello there")
        assert len(result.rows) == 1
        row = result.rows[0]
        assert isinstance(row, ModifiedRow)
        assert row.left_content == "hello world"
        assert row.right_content == "hello there"
        assert row.left_spans == (Span("hello ", SpanClass.EQUAL), Span("world", SpanClass.REMOVED))
        assert row.right_spans == (Span("hello ", SpanClass.EQUAL), Span("there", SpanClass.ADDED))
        assert result.counts.modified == 1

    def test_insertion(self):
        result = compare("a\nb\nc", "a\nx\nb\nc")
        assert [row.row_type for row in result.rows] == [
            DiffRowType.EQUAL, DiffRowType.ADDED, DiffRowType.EQUAL, DiffRowType.EQUAL
        ]
        assert result.rows[1].right_line_number == 2
        assert result.rows[2].left_line_number == 2
        assert result.rows[2].right_line_number == 3
        assert result.changed_row_indices == (1,)

    def test_deletion(self):
        result = compare("a\nb\nc", "a\nc")
        assert [row.row_type for row in result.rows] == [
            DiffRowType.EQUAL, DiffRowType.REMOVED, DiffRowType.EQUAL
        ]
        assert result.rows[1] == RemovedRow(index=1, left_line_number=2, left_content="b")

    def test_modified_line_between_equal_lines(self):
        result = compare(
            "alpha\nthe quick brown fox\nomega",
            "alpha\nthe quick red fox\nomega"
        )
        assert [row.row_type for row in result.rows] == [
            DiffRowType.EQUAL, DiffRowType.MODIFIED, DiffRowType.EQUAL
        ]
        assert result.changed_row_indices == (1,)
        assert result.rows[1].left_line_number == 2
        assert result.rows[1].right_line_number == 2

    def test_trailing_newline_is_an_empty_line(self):
        result = compare("a\n", "a")
        assert [row.row_type for row in result.rows] == [DiffRowType.EQUAL, DiffRowType.REMOVED]
        assert result.rows[1].left_content == ""

    def test_original_text_preserved_under_options(self):
        options = ComparisonOptions(ignore_case=True, ignore_whitespace=True)
        result = compare("  Foo Bar", "foobar", options)
        assert result.rows[0].left_content == "  Foo Bar"
        assert result.rows[0].right_content == "foobar"

    def test_coverage(self, sample_texts, default_options, ignore_case_options,
                      ignore_whitespace_options):
        for options in (default_options, ignore_case_options, ignore_whitespace_options):
            for left_text, right_text in sample_texts:
                result = compare(left_text, right_text, options)
                assert result.left_lines() == left_text.split("\n")
                assert result.right_lines() == right_text.split("\n")

                left_numbers = [r.left_line_number for r in result.rows
                                if r.left_line_number is not None]
                right_numbers = [r.right_line_number for r in result.rows
                                 if r.right_line_number is not None]
                assert left_numbers == list(range(1, len(left_numbers) + 1))
                assert right_numbers == list(range(1, len(right_numbers) + 1))

    def test_row_indices_and_navigation(self, sample_texts):
        for left_text, right_text in sample_texts:
            result = compare(left_text, right_text)
            assert [row.index for row in result.rows] == list(range(len(result.rows)))

            expected = tuple(row.index for row in result.rows
                             if row.row_type != DiffRowType.EQUAL)
            assert result.changed_row_indices == expected
            assert all(a < b for a, b in zip(expected, expected[1:]))

    def test_counts_tally_rows(self, sample_texts):
        for left_text, right_text in sample_texts:
            result = compare(left_text, right_text)
            counts = result.counts
            assert counts.equal + counts.total_changes == len(result.rows)
            assert counts.total_changes == len(result.changed_row_indices)

    def test_modified_rows_satisfy_span_invariant(self, sample_texts):
        for left_text, right_text in sample_texts:
            for row in compare(left_text, right_text).rows:
                if row.row_type != DiffRowType.MODIFIED:
                    assert row.left_spans is None
                    assert row.right_spans is None
                    continue
                assert_no_adjacent_same_class(row.left_spans)
                assert_no_adjacent_same_class(row.right_spans)
                assert "".join(s.text for s in row.left_spans) == row.left_content
                assert "".join(s.text for s in row.right_spans) == row.right_content

    def test_similarity_threshold_option(self):
        assert compare("ab", "ac").counts.modified == 1
        split = compare("ab", "ac", ComparisonOptions(similarity_threshold=0.6))
        assert split.counts.modified == 0
        assert split.counts.added == 1
        assert split.counts.removed == 1

    def test_engine_is_stateless(self):
        engine = TextDiffEngine()
        first = engine.compare("a\nb", "a\nc")
        engine.compare("x", "y")
        assert engine.compare("a\nb", "a\nc") == first

    def test_rejects_non_string_input(self):
        with pytest.raises(TypeError):
            compare(["a"], "a")
