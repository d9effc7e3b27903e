import base64
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont


def make_not_available_image(
    text: str = "Not available\n(page may still be loading\nor the screenshot timed out)",
) -> str:
    """Create a 'Not Available' image for when browser operations fail or timeout."""
    with BytesIO() as img_buf:
        width, height = 640, 480
        image = Image.new("RGB", (width, height), (255, 255, 255))

        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default(size=36)

        # center the text
        text_bbox = draw.multiline_textbbox((0, 0), text, font=font, align="center")
        text_width = text_bbox[2] - text_bbox[0]
        text_height = text_bbox[3] - text_bbox[1]
        text_position = ((width - text_width) // 2, (height - text_height) // 2)

        draw.multiline_text(text_position, text, font=font, fill=(0, 0, 0), align="center")

        image.save(img_buf, format="PNG")
        return base64.b64encode(img_buf.getvalue()).decode("utf-8")
