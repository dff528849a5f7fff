"""PIL-based key renderer for the Stream Deck front-end."""

from PIL import Image, ImageDraw, ImageFont

SIZE = (96, 96)

STATUS_COLORS = {
    "READY": "#6b7280",
    "RUNNING": "#3b82f6",
    "DONE": "#22c55e",
    "ERROR": "#ef4444",
}

BG_HUD = "#111827"
BG_DARK = "#1e293b"

# (font size, color) per line, indexed by line count - 1
LINE_STYLES = [
    [(18, "#ffffff")],
    [(16, "#ffffff"), (14, "#dddddd")],
    [(14, "#ffffff"), (12, "#dddddd"), (11, "#aaaaaa")],
    [(12, "#ffffff"), (11, "#dddddd"), (10, "#aaaaaa"), (9, "#888888")],
]

# Japanese glyphs need a CJK-capable face; Helvetica has none
FONT_PATHS = [
    "/System/Library/Fonts/ヒラギノ角ゴシック W6.ttc",
    "/System/Library/Fonts/Hiragino Sans GB.ttc",
    "/System/Library/Fonts/Helvetica.ttc",
]


def _font(size: int) -> ImageFont.FreeTypeFont:
    for path in FONT_PATHS:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def status_to_color(status: str) -> str:
    """Map a drill status to a hex color."""
    return STATUS_COLORS.get(status, "#6b7280")


def render_label(
    title: str,
    value: str | None = None,
    bg_color: str = BG_HUD,
    size: tuple[int, int] = SIZE,
) -> Image.Image:
    """Small grey title over a larger white value."""
    img = Image.new("RGB", size, bg_color)
    d = ImageDraw.Draw(img)
    if value is None:
        d.text((size[0] // 2, size[1] // 2), title, font=_font(16),
               fill="white", anchor="mm")
        return img
    d.text((size[0] // 2, 20), title, font=_font(12), fill="#9ca3af", anchor="mt")
    d.text((size[0] // 2, 50), value, font=_font(22), fill="white", anchor="mt")
    return img


def render_number(text: str, bg_color: str = BG_DARK,
                  size: tuple[int, int] = SIZE) -> Image.Image:
    """One big operand or answer, shrunk to fit longer strings."""
    img = Image.new("RGB", size, bg_color)
    d = ImageDraw.Draw(img)
    fsize = 40 if len(text) <= 2 else 30 if len(text) <= 4 else 20 if len(text) <= 7 else 14
    d.text((size[0] // 2, size[1] // 2), text, font=_font(fsize), fill="white", anchor="mm")
    return img


def render_text_button(
    size: tuple[int, int] = SIZE,
    lines: list[str] | None = None,
    bg_color: str = BG_DARK,
) -> Image.Image:
    """Centered text lines on a plain key. Later lines are smaller and dimmer."""
    img = Image.new("RGB", size, bg_color)
    if not lines:
        return img

    draw = ImageDraw.Draw(img)
    lines = lines[:len(LINE_STYLES)]
    styles = LINE_STYLES[len(lines) - 1]
    fonts = [_font(fsize) for fsize, _ in styles]
    heights = [f.getbbox("Ag")[3] - f.getbbox("Ag")[1] for f in fonts]
    spacing = 4
    y = (size[1] - sum(heights) - spacing * (len(lines) - 1)) // 2

    for text, font, (_, color), h in zip(lines, fonts, styles, heights):
        draw.text((size[0] // 2, y), text, font=font, fill=color, anchor="mt")
        y += h + spacing

    return img
