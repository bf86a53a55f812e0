from PIL import Image

from capset_backend.features.images import crop_image, delete_image


def _make_png(path, size=(40, 20)):
    img = Image.new("RGB", size, (255, 0, 0))
    # Mark the top-left pixel so orientation changes are observable.
    img.putpixel((0, 0), (0, 0, 255))
    img.save(path, format="PNG")
    return path


def test_crop_overwrites_in_place(dataset):
    path = _make_png(dataset.root / "a.png")
    res = crop_image(path, 0, 0, 10, 5)
    assert res.ok and res.data is None
    with Image.open(path) as out:
        assert out.size == (10, 5)
        assert out.format == "PNG"
        assert out.getpixel((0, 0)) == (0, 0, 255)


def test_crop_save_as_new_allocates_name_without_caption(dataset):
    path = _make_png(dataset.image("a.png", caption="x"))
    res = crop_image(path, 0, 0, 10, 10, save_as_new=True)
    assert res.ok
    new_path = dataset.root / "a_1_crop.png"
    assert res.data == str(new_path)
    assert new_path.is_file()
    assert not new_path.with_suffix(".txt").exists()
    with Image.open(path) as original:
        assert original.size == (40, 20)

    again = crop_image(path, 0, 0, 10, 10, save_as_new=True)
    assert again.data == str(dataset.root / "a_2_crop.png")


def test_crop_clamps_region_to_bounds(dataset):
    path = _make_png(dataset.root / "a.png")
    assert crop_image(path, 30, 10, 100, 100).ok
    with Image.open(path) as out:
        assert out.size == (10, 10)


def test_crop_zero_region_is_rejected(dataset):
    path = _make_png(dataset.root / "a.png")
    res = crop_image(path, 5, 5, 0, 10)
    assert not res.ok
    assert res.code == "INVALID_INPUT"


def test_rotate_clockwise_and_flip(dataset):
    path = _make_png(dataset.root / "a.png")
    assert crop_image(path, 0, 0, 40, 20, rotate_degrees=90).ok
    with Image.open(path) as out:
        assert out.size == (20, 40)
        # Top-left moves to top-right after a clockwise quarter turn.
        assert out.getpixel((19, 0)) == (0, 0, 255)

    path2 = _make_png(dataset.root / "b.png")
    assert crop_image(path2, 0, 0, 40, 20, flip_x=True, flip_y=True).ok
    with Image.open(path2) as out:
        assert out.getpixel((39, 19)) == (0, 0, 255)


def test_crop_missing_and_invalid_files(dataset):
    assert crop_image(dataset.root / "missing.png", 0, 0, 1, 1).code == "NOT_FOUND"
    bogus = dataset.image("bogus.png", data=b"not an image")
    assert crop_image(bogus, 0, 0, 1, 1).code == "IO_ERROR"


def test_delete_image_removes_caption(dataset):
    img = dataset.image("a.png", caption="x")
    assert delete_image(img).ok
    assert not img.exists()
    assert not img.with_suffix(".txt").exists()
    assert delete_image(img).code == "NOT_FOUND"
