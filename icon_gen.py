"""Generate the tray icon (64×64 PIL Image, in-memory) showing today's day."""

from PIL import Image, ImageDraw, ImageFont

ICON_SIZE = 64
_HEADER_H = 14
_ACCENT = "#0078D4"


def _fit_font(draw: ImageDraw.ImageDraw, text: str, max_w: int, max_h: int):
    """Largest bold font that fits the box; Pillow's default font if none installed."""
    font_size = 120
    while font_size > 10:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= max_w and bbox[3] - bbox[1] <= max_h:
            return font
        font_size -= 1
    return font


def create_icon_image(day: int) -> Image.Image:
    """Return a 64×64 RGBA calendar-page image: accent header, day number below."""
    size = ICON_SIZE
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, size - 1, _HEADER_H), fill=_ACCENT)

    text = str(day)
    body_h = size - _HEADER_H - 2
    font = _fit_font(draw, text, size - 4, body_h)

    # Centre the visible pixels (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = _HEADER_H + 1 + (body_h - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    return img
