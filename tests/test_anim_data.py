import pytest

from pocpen.anim_data import AnimInfo, parse_anim_data


def _anim_block(name, width, height, durations, index=None):
    """Build one <Anim> element in the layout the parser expects."""
    parts = [f"<Anim><Name>{name}</Name>"]
    if index is not None:
        parts.append(f"<Index>{index}</Index>")
    parts.append(f"<FrameWidth>{width}</FrameWidth><FrameHeight>{height}</FrameHeight>")
    parts.append("<Durations>")
    parts.extend(f"<Duration>{d}</Duration>" for d in durations)
    parts.append("</Durations></Anim>")
    return "\n".join(parts)


def _document(*blocks, header=True):
    body = "\n".join(blocks)
    prefix = '<?xml version="1.0" ?>\n' if header else ""
    return (
        f"{prefix}<AnimData>\n<ShadowSize>1</ShadowSize>\n"
        f"<Anims>\n{body}\n</Anims>\n</AnimData>"
    )


SAMPLE_XML = _document(
    _anim_block("Idle", 40, 56, [40, 2, 3], index=7),
    _anim_block("Sleep", 32, 40, [30, 35], index=5),
    _anim_block("Eat", 24, 48, [6, 8, 6, 8], index=15),
)

# An offline document shaped like the real six-frame Idle sheet.
SIX_FRAME_XML = _document(
    _anim_block("Idle", 40, 56, [40, 2, 3, 3, 3, 2]),
    _anim_block("Sleep", 32, 40, [30, 35]),
    _anim_block("Eat", 24, 48, [6, 8]),
    header=False,
)


def test_parse_finds_all_animations():
    anims = parse_anim_data(SAMPLE_XML)
    assert len(anims) == 3
    assert set(anims) == {"Idle", "Sleep", "Eat"}


def test_parse_idle_details():
    idle = parse_anim_data(SAMPLE_XML)["Idle"]
    assert idle.frame_width == 40
    assert idle.frame_height == 56
    assert idle.durations == [40, 2, 3]
    assert idle.frame_count() == 3


def test_parse_sleep_details():
    sleep = parse_anim_data(SAMPLE_XML)["Sleep"]
    assert sleep.frame_width == 32
    assert sleep.frame_height == 40
    assert sleep.durations == [30, 35]


def test_parse_eat_details():
    eat = parse_anim_data(SAMPLE_XML)["Eat"]
    assert eat.frame_width == 24
    assert eat.frame_height == 48
    assert eat.durations == [6, 8, 6, 8]
    assert eat.frame_count() == 4


def test_total_duration_ms():
    idle = parse_anim_data(SAMPLE_XML)["Idle"]
    assert idle.total_duration_ms() == 2250


def test_empty_xml():
    assert parse_anim_data("") == {}


def test_malformed_xml_skipped():
    assert parse_anim_data("<Anim><Name>Bad</Name></Anim>") == {}


def test_six_frame_idle_sheet():
    anims = parse_anim_data(SIX_FRAME_XML)
    assert {"Idle", "Sleep", "Eat"} <= set(anims)
    idle = anims["Idle"]
    assert idle.frame_width == 40
    assert idle.frame_height == 56
    assert idle.frame_count() == 6


@pytest.mark.parametrize("width", ["abc", "-4", "4.5", "99999999999"])
def test_invalid_frame_width_skips_block(width):
    xml = (
        f"<Anim><Name>X</Name><FrameWidth>{width}</FrameWidth>"
        "<FrameHeight>8</FrameHeight><Durations><Duration>1</Duration></Durations></Anim>"
    )
    assert parse_anim_data(xml) == {}


def test_invalid_durations_are_ignored():
    xml = (
        "<Anim><Name>X</Name><FrameWidth> 8 </FrameWidth><FrameHeight>9</FrameHeight>"
        "<Duration>x</Duration><Duration> 4 </Duration></Anim>"
    )
    assert parse_anim_data(xml) == {"X": AnimInfo(8, 9, [4])}


def test_duplicate_name_last_wins():
    xml = (
        "<Anim><Name>A</Name><FrameWidth>1</FrameWidth><FrameHeight>1</FrameHeight>"
        "<Duration>1</Duration></Anim>"
        "<Anim><Name>A</Name><FrameWidth>2</FrameWidth><FrameHeight>2</FrameHeight>"
        "<Duration>5</Duration></Anim>"
    )
    assert parse_anim_data(xml)["A"] == AnimInfo(2, 2, [5])