from daymark.skins import SKINS, get_skin, score_color


def test_every_skin_defines_the_same_colours():
    keys = set(SKINS["nexus"])
    for skin in SKINS.values():
        assert set(skin) == keys


def test_unknown_skin_falls_back_to_nexus():
    assert get_skin("does-not-exist") is SKINS["nexus"]
    assert get_skin("ember") is SKINS["ember"]


def test_score_color_follows_sign():
    skin = SKINS["ember"]
    assert score_color(skin, 3) == skin["positive"]
    assert score_color(skin, -1) == skin["negative"]
    assert score_color(skin, 0) == skin["neutral"]
