from adapters.kana import contains_kanji, kata_to_hira


def test_contains_kanji_anywhere_in_text():
    assert contains_kanji("新しい")
    assert contains_kanji("ひらがなと漢字")
    assert not contains_kanji("ひらがな")
    assert not contains_kanji("カタカナ123")
    assert not contains_kanji("")


def test_kata_to_hira_shifts_katakana_only():
    assert kata_to_hira("ニホンゴ") == "にほんご"
    assert kata_to_hira("ベンキョウ") == "べんきょう"
    assert kata_to_hira("ヴ") == "ゔ"
    # prolonged sound mark and non-katakana pass through
    assert kata_to_hira("ラーメン") == "らーめん"
    assert kata_to_hira("漢字abc") == "漢字abc"
