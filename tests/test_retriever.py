from tutor_api.services.knowledge.retriever import retrieve, score_fragment, tokenize
from tutor_api.services.knowledge.types import Fragment


def _fragment(fragment_id: int, digest: str, raw_text: str = "") -> Fragment:
    return Fragment(
        id=fragment_id,
        material_id="m1",
        source_name="Lecture",
        position=fragment_id - 1,
        raw_text=raw_text,
        digest=digest,
    )


def test_tokenize_splits_on_whitespace_commas_and_periods() -> None:
    assert tokenize("Apple, banana，Cherry。 apple.  ") == ["apple", "banana", "cherry"]


def test_score_counts_distinct_tokens_once() -> None:
    fragment = _fragment(1, "apples apples apples", raw_text="apples are red")

    assert score_fragment(tokenize("apples apples red"), fragment) == 2


def test_retrieve_ranks_by_overlap() -> None:
    apple = _fragment(1, "苹果很甜")
    banana = _fragment(2, "香蕉很甜")

    tokens = tokenize("苹果 甜")
    assert score_fragment(tokens, apple) == 2
    assert score_fragment(tokens, banana) == 1
    assert retrieve("苹果 甜", [banana, apple]) == [apple, banana]


def test_retrieve_breaks_ties_by_store_order() -> None:
    fragments = [_fragment(3, "cell wall"), _fragment(1, "cell membrane"), _fragment(2, "cell")]

    assert [fragment.id for fragment in retrieve("cell", fragments)] == [1, 2, 3]


def test_retrieve_matches_raw_text_case_insensitively() -> None:
    fragment = _fragment(1, "summary", raw_text="Photosynthesis happens in Chloroplasts")

    assert retrieve("CHLOROPLASTS", [fragment]) == [fragment]


def test_retrieve_truncates_to_limit() -> None:
    fragments = [_fragment(index, f"topic {index}") for index in range(1, 9)]

    assert [fragment.id for fragment in retrieve("topic", fragments, limit=5)] == [1, 2, 3, 4, 5]


def test_retrieve_without_overlap_falls_back_to_first_fragments() -> None:
    fragments = [_fragment(index, f"note {index}") for index in range(1, 6)]

    assert [fragment.id for fragment in retrieve("unrelated", fragments)] == [1, 2, 3]
    assert [fragment.id for fragment in retrieve("unrelated", fragments[:2])] == [1, 2]


def test_retrieve_fallback_count_is_configurable() -> None:
    fragments = [_fragment(index, f"note {index}") for index in range(1, 6)]

    assert [f.id for f in retrieve("unrelated", fragments, fallback_count=1)] == [1]
    assert retrieve("unrelated", fragments, fallback_count=0) == []


def test_retrieve_on_empty_input_returns_nothing() -> None:
    assert retrieve("anything", []) == []


def test_retrieve_zero_limit_does_not_fall_back_when_fragments_match() -> None:
    fragments = [_fragment(1, "apple pie"), _fragment(2, "apple juice")]

    assert retrieve("apple", fragments, limit=0) == []
