import pytest

from tutor_api.services.knowledge.segmenter import segment, split_sentences


def test_split_sentences_handles_ascii_and_full_width_terminators() -> None:
    text = "First line\nSecond! Third? 第四。第五！第六？ Seventh."

    assert split_sentences(text) == [
        "First line",
        "Second",
        "Third",
        "第四",
        "第五",
        "第六",
        "Seventh",
    ]


def test_segment_keeps_short_document_in_one_fragment() -> None:
    assert segment("猫是动物。狗是动物。", 300) == ["猫是动物。狗是动物。"]


def test_segment_without_terminators_returns_whole_text_plus_terminator() -> None:
    text = "  " + "x" * 50 + "  "

    assert segment(text, 10) == ["x" * 50 + "。"]


@pytest.mark.parametrize("text", ["", "   ", "\n\n", "。。！？..."])
def test_segment_blank_text_yields_nothing(text: str) -> None:
    assert segment(text, 300) == []


def test_segment_greedily_packs_sentences_under_bound() -> None:
    sentences = ["a" * 8, "b" * 8, "c" * 8, "d" * 8]
    text = "。".join(sentences)

    fragments = segment(text, 20)

    assert fragments == ["a" * 8 + "。" + "b" * 8 + "。", "c" * 8 + "。" + "d" * 8 + "。"]
    for fragment in fragments:
        assert fragment
        assert len(fragment[:-1]) <= 20


def test_segment_does_not_emit_empty_fragment_for_long_first_sentence() -> None:
    fragments = segment("y" * 40 + "。short", 10)

    assert fragments == ["y" * 40 + "。", "short。"]


def test_segment_uses_configured_terminator() -> None:
    assert segment("One. Two", 300, terminator=". ") == ["One. Two. "]


def test_segment_rejects_non_positive_bound() -> None:
    with pytest.raises(ValueError, match="max_length"):
        segment("text", 0)
