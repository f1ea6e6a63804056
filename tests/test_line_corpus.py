import dataclasses

import pytest

from receipt_ocr.extraction import LineCorpus


def test_joined_lowercase_uses_single_spaces():
    corpus = LineCorpus.from_lines(["FRESH Mart", "Total  20.00"])
    assert corpus.joined_lowercase == "fresh mart total  20.00"


def test_lines_are_stored_as_tuple():
    source = ["a", "b"]
    corpus = LineCorpus(source)
    source.append("c")

    assert corpus.lines == ("a", "b")
    assert len(corpus) == 2


def test_corpus_is_immutable():
    corpus = LineCorpus(["a"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        corpus.lines = ("b",)


def test_from_pages_keeps_page_then_line_order():
    corpus = LineCorpus.from_pages([("p1 l1", "p1 l2"), (), ("p3 l1",)])
    assert corpus.lines == ("p1 l1", "p1 l2", "p3 l1")


def test_empty_corpus():
    corpus = LineCorpus()
    assert corpus.is_empty()
    assert corpus.joined_lowercase == ""
    assert corpus.head(7) == ()


def test_equal_lines_compare_equal():
    assert LineCorpus(["x", "y"]) == LineCorpus.from_lines(iter(["x", "y"]))
