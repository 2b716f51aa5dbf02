from icon_gen import ICON_SIZE, create_icon_image


def test_icon_is_square_rgba():
    img = create_icon_image(15)
    assert img.size == (ICON_SIZE, ICON_SIZE)
    assert img.mode == "RGBA"


def test_icon_has_header_and_digits():
    img = create_icon_image(28)
    assert img.getpixel((0, 0)) == (0, 120, 212, 255)
    body = img.convert("L").crop((0, 16, ICON_SIZE, ICON_SIZE))
    darkest, _lightest = body.getextrema()
    assert darkest < 128
