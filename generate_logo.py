import os

from PIL import Image, ImageDraw

from config import LOGO_PATH


def build_logo(path=LOGO_PATH):
    """Renders the 120x120 app badge and returns its path."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    img = Image.new("RGBA", (120, 120), "#0e1117")
    draw = ImageDraw.Draw(img)

    draw.ellipse((10, 10, 110, 110), fill="#1f2937")
    # 75% ring
    draw.arc((16, 16, 104, 104), start=-90, end=180, fill="#3B82F6", width=6)
    draw.text((40, 52), "CM", fill="white")

    img.save(path)
    return path


if __name__ == "__main__":
    print(f"{build_logo()} created successfully")
