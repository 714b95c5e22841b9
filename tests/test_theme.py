import pytest

from dexfm.theme import Colour, Theme, parse_colour_value


def test_default_palette_matches_source():
    theme = Theme()
    assert theme.fill_colour == Colour(77, 159, 151)
    assert theme.light_background == Colour(78, 72, 63)
    assert theme.background == Colour(60, 50, 47)
    assert theme.round_background == Colour(58, 52, 48)


def test_default_registered_colours():
    theme = Theme()
    assert theme.colours["TextButton::buttonColourId"].argb() == 0xFF0FC00F
    assert theme.colours["TextEditor::backgroundColourId"] == Colour(20, 18, 18)
    assert theme.colours["PopupMenu::highlightedBackgroundColourId"] == theme.fill_colour
    assert theme.colours["TextEditor::outlineColourId"].alpha == 0


def test_colour_argb_round_trip():
    for value in (0xFF0FC00F, 0x00000000, 0xFFFFFFFF, 0x80123456):
        assert Colour.from_argb(value).argb() == value


def test_colour_from_argb_channels():
    colour = Colour.from_argb(0xFF0FC00F)
    assert (colour.alpha, colour.red, colour.green, colour.blue) == (0xFF, 0x0F, 0xC0, 0x0F)


def test_colour_rejects_out_of_range_channel():
    with pytest.raises(ValueError):
        Colour(256, 0, 0)


def test_parse_colour_value_plain_hex():
    assert parse_colour_value("FF0FC00F") == 0xFF0FC00F


def test_parse_colour_value_too_short():
    assert parse_colour_value("FFFFFF") is None
    assert parse_colour_value("") is None


def test_parse_colour_value_stops_at_invalid_char():
    assert parse_colour_value("FF0FC00Fzz") == 0xFF0FC00F


def test_parse_colour_value_prefix_and_garbage():
    assert parse_colour_value("0xFF0FC00F") == 0xFF0FC00F
    assert parse_colour_value("zzzzzzzz") == 0


def test_apply_xml_sets_registered_colour():
    theme = Theme()
    ok = theme.apply_xml(
        '<theme><colour id="ComboBox::textColourId" value="FF0FC00F"/></theme>'
    )
    assert ok is True
    assert theme.colours["ComboBox::textColourId"].argb() == 0xFF0FC00F


def test_apply_xml_sets_fill_and_background():
    theme = Theme()
    theme.apply_xml(
        "<theme>"
        '<colour id="Dexed::fillColourId" value="FF0FC00F"/>'
        '<colour id="Dexed::backgroundId" value="FFFFFFFF"/>'
        "</theme>"
    )
    assert theme.fill_colour == Colour.from_argb(0xFF0FC00F)
    assert theme.background == Colour.from_argb(0xFFFFFFFF)
    # colours registered before the override keep their earlier value
    assert theme.colours["PopupMenu::backgroundColourId"] == Colour(60, 50, 47)


def test_apply_xml_ignores_short_unknown_and_empty():
    theme = Theme()
    before = dict(theme.colours)
    theme.apply_xml(
        "<theme>"
        '<colour id="ComboBox::textColourId" value="FFF"/>'
        '<colour id="Nothing::here" value="FF0FC00F"/>'
        '<colour id="" value="FF0FC00F"/>'
        "</theme>"
    )
    assert theme.colours == before
    assert theme.fill_colour == Colour(77, 159, 151)


def test_apply_xml_malformed_keeps_theme():
    theme = Theme()
    before = dict(theme.colours)
    assert theme.apply_xml("<theme><colour") is False
    assert theme.colours == before


def test_apply_xml_images():
    theme = Theme()
    theme.apply_xml(
        "<theme>"
        '<image id="Knob_34x34.png" path="/themes/knob.png"/>'
        '<image id="Light_14x14.png" path="a"/>'
        "</theme>"
    )
    assert theme.images["knob"] == "/themes/knob.png"
    assert theme.images["light"] is None
    assert theme.images["slider"] == "Slider_52x52.png"


def test_load_missing_file(tmp_path):
    theme = Theme()
    assert theme.load(tmp_path / "DexedTheme.xml") is False
    assert theme.fill_colour == Colour(77, 159, 151)


def test_load_file(tmp_path):
    path = tmp_path / "DexedTheme.xml"
    path.write_text(
        '<theme><colour id="TreeView::backgroundColourId" value="FF0FC00F"/></theme>',
        encoding="utf-8",
    )
    theme = Theme()
    assert theme.load(path) is True
    assert theme.colours["TreeView::backgroundColourId"].argb() == 0xFF0FC00F