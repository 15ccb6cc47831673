"""캔버스 크기 관리 및 픽셀 정규화 모듈."""

from pathlib import Path
from PIL import Image

# 0..65535 범위의 넓은 채널을 쓰는 정수 모드
_WIDE_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")

# 출력 확장자 → Pillow 인코더
OUTPUT_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}
JPEG_QUALITY = 90


def to_rgba(image: Image.Image) -> Image.Image:
    """어떤 저장 형식의 이미지든 8비트 straight-alpha RGBA로 읽는다.

    팔레트, premultiplied(RGBa), CMYK 등은 Pillow 변환에 맡기고,
    16비트 정수 채널은 v / 256 으로 8비트로 좁힌다.
    """
    if image.mode == "RGBA":
        return image
    if image.mode in _WIDE_MODES:
        image = image.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    return image.convert("RGBA")


def output_format(path: str | Path) -> str:
    """출력 파일 확장자에 맞는 인코더 이름을 반환한다."""
    ext = Path(path).suffix.lower()
    if ext not in OUTPUT_FORMATS:
        raise ValueError(
            f"출력 파일은 .png/.jpg/.jpeg 중 하나로 끝나야 합니다: {path}"
        )
    return OUTPUT_FORMATS[ext]


def save_image(image: Image.Image, path: str | Path) -> Path:
    """확장자에 따라 PNG 또는 JPEG(품질 90)으로 저장한다."""
    path = Path(path)
    fmt = output_format(path)
    if fmt == "JPEG":
        image.convert("RGB").save(path, fmt, quality=JPEG_QUALITY)
    else:
        image.save(path, fmt)
    return path


class Canvas:
    """배경, 마스크, 출력이 공유하는 고정 크기 캔버스."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"캔버스 크기가 올바르지 않습니다: {width}x{height}")
        self._width = width
        self._height = height

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def new(self, color: tuple = (0, 0, 0, 0), mode: str = "RGBA") -> Image.Image:
        """캔버스 크기의 빈 이미지를 만든다."""
        return Image.new(mode, self.size, color)

    def fit(self, image: Image.Image) -> Image.Image:
        """이미지를 RGBA로 정규화하고, 크기가 다르면 bicubic으로 리사이즈한다."""
        image = to_rgba(image)
        if image.size != self.size:
            image = image.resize(self.size, Image.Resampling.BICUBIC)
        return image

    def check(self, *images: Image.Image) -> None:
        """모든 이미지가 캔버스 크기와 같은지 확인한다."""
        for img in images:
            if img.size != self.size:
                raise ValueError(
                    f"이미지 크기 {img.size[0]}x{img.size[1]}가 "
                    f"캔버스 {self._width}x{self._height}와 다릅니다"
                )
