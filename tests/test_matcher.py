import pytest

from cinesift_app.metadata.matcher import (
    completeness_score,
    normalize_title,
    same_media,
    titles_similar,
    years_compatible,
)
from cinesift_app.metadata.models import MediaRecord, SourceType


@pytest.mark.parametrize("title, expected", [
    ("Suzume no Tojimari", "suzumenotojimari"),
    ("铃芽之旅（2022）", "铃芽之旅2022"),
    ("すずめの戸締まり!", "すずめの戸締まり"),
    ("  ", ""),
    (None, ""),
])
def test_normalize_title(title, expected):
    assert normalize_title(title) == expected


@pytest.mark.parametrize("title", [
    "Your Name.", "你的名字。", "【推しの子】", "Re:ゼロから始める異世界生活", "",
])
def test_normalize_title_is_idempotent(title):
    once = normalize_title(title)
    assert normalize_title(once) == once


def test_titles_similar_containment_needs_two_chars():
    assert titles_similar("铃芽之旅", "铃芽之旅：特别版")
    assert titles_similar("Suzume", "suzume!")
    assert not titles_similar("a", "abc")
    assert not titles_similar("", "")
    assert not titles_similar("天气之子", "铃芽之旅")


def test_years_compatible():
    assert years_compatible("2022", "2023")
    assert not years_compatible("2021", "2023")
    assert years_compatible(None, "2023")
    assert years_compatible("2022", None)


def _record(source_type, title, year=None, original=None):
    return MediaRecord(
        source_type=source_type,
        source_id=title or "x",
        title_localized=title,
        title_original=original,
        year=year,
    )


def test_same_media_cross_title_pairing_is_symmetric():
    a = _record(SourceType.TMDB, "铃芽之旅", "2022", "すずめの戸締まり")
    b = _record(SourceType.BANGUMI, "すずめの戸締まり", "2022")
    assert same_media(a, b)
    assert same_media(b, a)


def test_same_media_year_gap_is_hard_requirement():
    a = _record(SourceType.TMDB, "铃芽之旅", "2020")
    b = _record(SourceType.MAOYAN, "铃芽之旅", "2023")
    assert not same_media(a, b)
    assert not same_media(b, a)


def test_completeness_prefers_richer_records():
    bare = _record(SourceType.DOUBAN, "铃芽之旅")
    rich = MediaRecord(
        source_type=SourceType.TMDB,
        source_id="1",
        poster_url="https://image.tmdb.org/t/p/w500/p.jpg",
        summary="一个足够长的剧情简介文本内容",
        rating_imdb=7.7,
        directors=["新海诚"],
    )
    assert completeness_score(bare) == 3
    assert completeness_score(rich) == 20 + 15 + 10 + 8 + 10


def test_normalize_title_keeps_only_ascii_word_characters_outside_kana_and_cjk():
    assert normalize_title("Amélie") == "amlie"
    assert normalize_title("기생충") == ""
    assert normalize_title("Сталкер 1979") == "1979"
    assert normalize_title("すずめの戸締まり Suzume") == "すずめの戸締まりsuzume"
    assert not titles_similar("Amélie", "Amelie")
