from pathlib import Path

from capset_backend.features import captions


def _caption(path: Path) -> str:
    return path.with_suffix(".txt").read_text(encoding="utf-8")


def test_parse_tags_trims_and_drops_empties():
    assert captions.parse_tags(" red hair, ,smiling ,, 1girl ") == ["red hair", "smiling", "1girl"]
    assert captions.parse_tags("") == []


def test_caption_path_for_uses_same_stem(tmp_path):
    assert captions.caption_path_for(tmp_path / "sub" / "img.final.png") == tmp_path / "sub" / "img.final.txt"


def test_read_caption_missing_file(dataset):
    img = dataset.image("a.png")
    res = captions.read_caption(img)
    assert res.ok
    assert res.data.to_dict() == {"exists": False, "raw": "", "tags": []}


def test_write_then_read_round_trip(dataset):
    img = dataset.image("a.png")
    assert captions.write_caption(img, ["red hair", "smiling"]).ok
    assert _caption(img) == "red hair, smiling"

    res = captions.read_caption(img)
    assert res.data.exists
    assert res.data.tags == ["red hair", "smiling"]


def test_caption_text_none_without_file(dataset):
    img = dataset.image("a.png")
    assert captions.caption_text(img) is None
    img.with_suffix(".txt").write_text("  x  ", encoding="utf-8")
    assert captions.caption_text(img) == "  x  "


def test_read_caption_reports_undecodable_file(dataset):
    img = dataset.image("a.png")
    img.with_suffix(".txt").write_bytes(b"\xff\xfe\xfa")
    res = captions.read_caption(img)
    assert not res.ok
    assert res.code == "IO_ERROR"


def test_add_tag_dedups_case_insensitively(dataset):
    img = dataset.image("a.png", caption="Red Hair, smiling")
    before = img.with_suffix(".txt").stat().st_mtime_ns

    res = captions.add_tag(img, "red hair")
    assert res.ok and res.data == ["Red Hair", "smiling"]
    assert img.with_suffix(".txt").stat().st_mtime_ns == before

    res = captions.add_tag(img, "  outdoors ")
    assert res.data == ["Red Hair", "smiling", "outdoors"]
    assert _caption(img) == "Red Hair, smiling, outdoors"


def test_add_tag_ignores_blank_and_creates_file(dataset):
    img = dataset.image("a.png")
    assert captions.add_tag(img, "   ").data == []
    assert not img.with_suffix(".txt").exists()

    assert captions.add_tag(img, "first").data == ["first"]
    assert _caption(img) == "first"


def test_remove_tag_case_insensitive(dataset):
    img = dataset.image("a.png", caption="a, B, b, c")
    res = captions.remove_tag(img, "b")
    assert res.data == ["a", "c"]
    assert _caption(img) == "a, c"


def test_remove_tag_without_caption_file_does_not_create_one(dataset):
    img = dataset.image("a.png")
    res = captions.remove_tag(img, "x")
    assert res.ok and res.data == []
    assert not img.with_suffix(".txt").exists()


def test_reorder_tags_writes_verbatim(dataset):
    img = dataset.image("a.png", caption="a, b")
    assert captions.reorder_tags(img, ["b", "a", "B", "a"]).ok
    assert _caption(img) == "b, a, B, a"


def test_clear_all_captions(dataset):
    a = dataset.image("a.png", caption="x, y")
    b = dataset.image("sub/b.jpg")
    (dataset.root / "readme.txt").write_text("keep", encoding="utf-8")

    res = captions.clear_all_captions(dataset.root)
    assert res.ok and res.data == 2
    assert _caption(a) == ""
    assert _caption(b) == ""
    assert (dataset.root / "readme.txt").read_text(encoding="utf-8") == "keep"


def test_clear_all_captions_missing_root(tmp_path):
    res = captions.clear_all_captions(tmp_path / "nope")
    assert not res.ok
    assert res.code == "NOT_A_DIRECTORY"


def test_clear_all_captions_stops_on_write_failure(dataset, monkeypatch):
    dataset.image("a.png")
    dataset.image("b.png")
    from capset_backend.features.captions import store

    calls = []

    def _fail(path, content):
        calls.append(path)
        return store.Result.Err("IO_ERROR", "disk full")

    monkeypatch.setattr(store, "_write_text", _fail)
    res = captions.clear_all_captions(dataset.root)
    assert not res.ok
    assert res.code == "IO_ERROR"
    assert res.meta["cleared"] == 0
    assert len(calls) == 1
