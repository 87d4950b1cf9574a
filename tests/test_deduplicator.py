from cinesift_app.metadata.models import MediaRecord, SourceType
from cinesift_app.search.deduplicator import SearchDeduplicator, merge_records


def _tmdb(**fields):
    base = dict(
        source_type=SourceType.TMDB,
        source_id="916224",
        title_localized="铃芽之旅",
        title_original="すずめの戸締まり",
        year="2022",
        poster_url="https://image.tmdb.org/t/p/w500/p.jpg",
        rating=7.7,
        rating_imdb=7.7,
    )
    base.update(fields)
    return MediaRecord(**base)


def _douban(**fields):
    base = dict(
        source_type=SourceType.DOUBAN,
        source_id="35235192",
        title_localized="铃芽之旅",
        year="2022",
        rating=7.3,
        rating_douban=7.3,
    )
    base.update(fields)
    return MediaRecord(**base)


def _maoyan(**fields):
    base = dict(
        source_type=SourceType.MAOYAN,
        source_id="1355237",
        title_localized="铃芽之旅",
        year="2023",
        rating=8.4,
        rating_maoyan=8.4,
        wish="12345",
    )
    base.update(fields)
    return MediaRecord(**base)


def test_merge_fills_only_missing_values():
    primary = _tmdb(summary="已有简介")
    secondary = _douban(summary="另一个简介", genres=["动画"])

    merged = merge_records(primary, secondary)

    assert merged.source_type is SourceType.TMDB
    assert merged.source_id == "916224"
    assert merged.match_count == 2
    assert merged.summary == "已有简介"
    assert merged.genres == ["动画"]
    assert merged.rating_imdb == 7.7
    assert merged.rating_douban == 7.3
    # Inputs are untouched
    assert primary.match_count == 1
    assert primary.genres == []


def test_merge_ratings_and_fill_fields_commute():
    a = _tmdb(genres=[])
    b = _maoyan(poster_url=None, genres=["动画", "奇幻"])

    ab = merge_records(a, b)
    ba = merge_records(b, a)

    assert ab.source_ratings == ba.source_ratings
    assert ab.match_count == ba.match_count == 2
    assert ab.genres == ba.genres == ["动画", "奇幻"]
    assert ab.poster_url == ba.poster_url


def test_poster_enrichment_from_lower_scored_record():
    # Bangumi record wins on completeness but has no poster
    primary = MediaRecord(
        source_type=SourceType.BANGUMI,
        source_id="302189",
        title_localized="铃芽之旅",
        title_original="すずめの戸締まり",
        year="2022",
        summary="九州一个宁静小镇里生活着的17岁少女铃芽",
        duration="1话",
        rating=7.8,
        rating_bangumi=7.8,
    )
    secondary = MediaRecord(
        source_type=SourceType.MAOYAN,
        source_id="1355237",
        title_localized="铃芽之旅",
        year="2023",
        poster_url="http://x/poster.jpg",
    )

    unique = SearchDeduplicator().deduplicate([secondary, primary])

    assert len(unique) == 1
    assert unique[0].source_type is SourceType.BANGUMI
    assert unique[0].poster_url == "http://x/poster.jpg"
    assert unique[0].match_count == 2


def test_deduplicate_collapses_three_sources():
    unique = SearchDeduplicator().deduplicate([_tmdb(), _maoyan(), _douban()])

    assert len(unique) == 1
    record = unique[0]
    assert record.source_type is SourceType.TMDB
    assert record.match_count == 3
    assert record.rating_imdb == 7.7
    assert record.rating_maoyan == 8.4
    assert record.rating_douban == 7.3


def test_deduplicate_keeps_distinct_titles():
    other = _douban(source_id="2", title_localized="天气之子", year="2019")
    unique = SearchDeduplicator().deduplicate([_tmdb(), other])
    assert [r.source_id for r in unique] == ["916224", "2"]


def test_deduplicate_is_stable_for_equal_scores():
    first = _douban(source_id="1", title_localized="你的名字", year="2016")
    second = _douban(source_id="2", title_localized="天气之子", year="2019")
    third = _douban(source_id="3", title_localized="秒速五厘米", year="2007")

    unique = SearchDeduplicator().deduplicate([first, second, third])

    assert [r.source_id for r in unique] == ["1", "2", "3"]


def test_deduplicate_is_idempotent():
    records = [
        _tmdb(),
        _maoyan(),
        _douban(),
        _douban(source_id="2", title_localized="天气之子", year="2019"),
    ]
    dedup = SearchDeduplicator()

    once = dedup.deduplicate(records)
    twice = dedup.deduplicate(once)

    def key(rs):
        return [(r.source_type, r.source_id, r.match_count) for r in rs]

    assert key(twice) == key(once)


def test_deduplicate_empty():
    assert SearchDeduplicator().deduplicate([]) == []


def test_bucketed_path_matches_linear_path():
    records = []
    for i in range(40):
        records.append(_douban(source_id=f"d{i}", title_localized=f"作品{i}号", year="2020"))
        records.append(_tmdb(source_id=f"t{i}", title_localized=f"作品{i}号", title_original=None, year="2020"))

    linear = SearchDeduplicator(bucket_threshold=1000).deduplicate(records)
    bucketed = SearchDeduplicator(bucket_threshold=10).deduplicate(records)

    def key(rs):
        return [(r.source_id, r.match_count) for r in rs]

    assert key(bucketed) == key(linear)


def test_bucketed_path_finds_containment_with_different_first_character():
    short = _douban(source_id="1", title_localized="铃芽之旅", year="2022")
    long = _douban(source_id="2", title_localized="新海诚铃芽之旅", year="2022")

    linear = SearchDeduplicator(bucket_threshold=1000).deduplicate([short, long])
    bucketed = SearchDeduplicator(bucket_threshold=1).deduplicate([short, long])

    assert len(linear) == 1
    assert [(r.source_id, r.match_count) for r in bucketed] == \
        [(r.source_id, r.match_count) for r in linear]


def test_bucketed_path_matches_linear_path_on_mixed_titles():
    records = [
        _tmdb(),
        _maoyan(title_localized="すずめの戸締まり", year="2022"),
        _douban(title_localized="新海诚：铃芽之旅"),
        _douban(source_id="3", title_localized="天气之子", year="2019"),
        _maoyan(source_id="4", title_localized="Weathering With You", year="2019"),
        _tmdb(source_id="5", title_localized="天气之子", title_original="Weathering with You",
              year="2019", poster_url=None),
        _douban(source_id="6", title_localized=None, year="2019"),
        _douban(source_id="7", title_localized="你的名字。", year="2016"),
    ]

    linear = SearchDeduplicator(bucket_threshold=1000).deduplicate(records)
    bucketed = SearchDeduplicator(bucket_threshold=1).deduplicate(records)

    def key(rs):
        return [(r.source_type, r.source_id, r.match_count) for r in rs]

    assert key(bucketed) == key(linear)
    assert len(linear) == 4
