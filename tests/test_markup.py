from cinesift_app.utils.markup import (
    absolutize_url,
    extract_attr,
    extract_text,
    paragraphize,
    parse_float,
    parse_html,
    split_info_line,
    upgrade_image_resolution,
)


def test_split_info_line_full_date_and_credits():
    info = split_info_line("2022年11月11日 / 新海诚 / CoMix Wave Films")
    assert info.release_date == "2022-11-11"
    assert info.year == "2022"
    assert info.duration is None
    assert info.staff == "新海诚 / CoMix Wave Films"


def test_split_info_line_year_month_and_episodes():
    info = split_info_line("12话 / 2023年4月 / 监督: 某人")
    assert info.release_date == "2023-04-01"
    assert info.year == "2023"
    assert info.duration == "12话"
    assert info.staff == "监督: 某人"


def test_split_info_line_year_only():
    info = split_info_line("1998年")
    assert info.release_date == "1998-01-01"
    assert info.year == "1998"
    assert info.staff is None


def test_split_info_line_empty():
    info = split_info_line(None)
    assert info.release_date is None
    assert info.year is None
    assert info.staff is None


def test_image_url_helpers():
    assert absolutize_url("//lain.bgm.tv/pic/a.jpg") == "https://lain.bgm.tv/pic/a.jpg"
    assert absolutize_url("https://x/a.jpg") == "https://x/a.jpg"
    assert absolutize_url("") is None
    assert upgrade_image_resolution("https://lain.bgm.tv/pic/cover/s/ab.jpg") == \
        "https://lain.bgm.tv/pic/cover/l/ab.jpg"
    assert upgrade_image_resolution("https://lain.bgm.tv/pic/cover/m/ab.jpg") == \
        "https://lain.bgm.tv/pic/cover/l/ab.jpg"
    assert upgrade_image_resolution(None) is None


def test_parse_float():
    assert parse_float("7.8") == 7.8
    assert parse_float("(123人评分) 6") == 123.0
    assert parse_float("暂无") == 0.0
    assert parse_float(None) == 0.0


def test_paragraphize():
    assert paragraphize("第一段\u00a0第二段") == "第一段\n第二段"
    assert paragraphize("  a     b  ") == "a\nb"
    assert paragraphize("   ") is None


def test_extract_helpers():
    soup = parse_html('<div><a class="l" href=" /subject/1 ">  名字 </a><span></span></div>')
    assert extract_text(soup, "a.l") == "名字"
    assert extract_attr(soup, "href", "a.l") == "/subject/1"
    assert extract_text(soup, "span") is None
    assert extract_text(soup, "p") is None
    assert extract_attr(None, "href") is None
