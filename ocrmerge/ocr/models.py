from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class AddressZone:
    """Rectangle on a page in inches, measured from the top-left corner."""

    left: float
    top: float
    width: float
    height: float

    def to_pixels(self, dpi: int, image_size: tuple[int, int]) -> tuple[int, int, int, int]:
        """Pixel box (left, upper, right, lower) at dpi, clamped to the image."""
        img_w, img_h = image_size
        left = min(max(round(self.left * dpi), 0), img_w)
        upper = min(max(round(self.top * dpi), 0), img_h)
        right = min(max(round((self.left + self.width) * dpi), left), img_w)
        lower = min(max(round((self.top + self.height) * dpi), upper), img_h)
        return left, upper, right, lower


# Window-envelope address block on page 1.
ADDRESS_ZONE = AddressZone(left=0.0, top=2.0, width=4.0, height=1.4)


@dataclass
class PageImage:
    """A rendered page together with the resolution it was rendered at."""

    image: Image.Image
    dpi: int


@dataclass(frozen=True)
class AddressReading:
    page_count: int
    text: str
