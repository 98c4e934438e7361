from archive import sanitize


def test_sanitize_replaces_slash_and_strips_illegal_chars() -> None:
    assert sanitize("a/b:c") == "a-bc"
    assert sanitize('inv<oi>ce*?"|\\') == "invoice"


def test_sanitize_collapses_spacing() -> None:
    assert sanitize("  Tax__ return \t 2019 _ ") == "Tax return 2019"


def test_sanitize_falls_back_for_empty_results() -> None:
    assert sanitize("") == "untitled"
    assert sanitize("  ::  ") == "untitled"
    assert sanitize("..") == "untitled"


def test_sanitize_truncates_by_characters() -> None:
    label = "ä" * 250

    result = sanitize(label)

    assert result == "ä" * 200


def test_sanitize_is_idempotent() -> None:
    samples = [
        "",
        "a/b:c",
        "x" * 199 + " tail",
        "__lead and trail__",
        "Brief an Müller / Rechnung 12:2019",
        ".",
        "tabs\tand\nnewlines",
    ]
    for sample in samples:
        once = sanitize(sample)
        assert sanitize(once) == once
        assert 0 < len(once) <= 200
