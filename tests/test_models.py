from cinesift_app.metadata.models import (
    MediaRecord,
    MediaType,
    NO_STAFF,
    NO_SUMMARY,
    SourceType,
    UNKNOWN_DATE,
    UNKNOWN_DURATION,
    UNKNOWN_TITLE,
    UNKNOWN_YEAR,
    clean_text,
)


def test_clean_text_maps_blanks_and_sentinels_to_none():
    assert clean_text("  铃芽之旅 ") == "铃芽之旅"
    assert clean_text("   ") is None
    assert clean_text(None) is None
    assert clean_text(UNKNOWN_TITLE) is None
    assert clean_text(NO_SUMMARY) is None


def test_post_init_normalizes_fields():
    record = MediaRecord(
        source_type="maoyan",
        source_id="9",
        media_type="movie",
        year="202",
        actors=["a", "b", "c", "d", "e", "f"],
        rating=-1,
        match_count=0,
    )
    assert record.source_type is SourceType.MAOYAN
    assert record.media_type is MediaType.MOVIE
    assert record.year is None
    assert record.actors == ["a", "b", "c", "d", "e"]
    assert record.rating == 0.0
    assert record.match_count == 1


def test_to_dict_fills_display_sentinels():
    data = MediaRecord(source_type=SourceType.DOUBAN, source_id="1").to_dict()
    assert data["sourceType"] == "douban"
    assert data["titleZh"] == UNKNOWN_TITLE
    assert data["titleOriginal"] == ""
    assert data["releaseDate"] == UNKNOWN_DATE
    assert data["year"] == UNKNOWN_YEAR
    assert data["duration"] == UNKNOWN_DURATION
    assert data["summary"] == NO_SUMMARY
    assert data["staff"] == NO_STAFF
    assert data["posterUrl"] == ""
    assert data["wish"] == "0"
    assert data["isNew"] is False
    assert data["matchCount"] == 1


def test_to_dict_tmdb_staff_is_empty():
    data = MediaRecord(source_type=SourceType.TMDB, source_id="1").to_dict()
    assert data["staff"] == ""


def test_copy_does_not_share_lists():
    record = MediaRecord(source_type=SourceType.TMDB, source_id="1", genres=["动画"])
    clone = record.copy(summary="x")
    clone.genres.append("奇幻")
    assert record.genres == ["动画"]
    assert clone.summary == "x"
    assert record.summary is None
