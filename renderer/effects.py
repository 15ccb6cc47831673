"""잉크 레이어 변환 모듈 — 뒤집기, 색 반전, 단색 채우기.

모든 함수는 입력을 건드리지 않고 같은 크기의 새 RGBA 이미지를 돌려준다.
"""

from PIL import Image, ImageChops

from .canvas import to_rgba


def flip(image: Image.Image) -> Image.Image:
    """가로·세로를 모두 뒤집는다. (x, y) 픽셀이 (W-1-x, H-1-y)로 간다."""
    return to_rgba(image).transpose(Image.Transpose.ROTATE_180)


def invert(image: Image.Image) -> Image.Image:
    """R, G, B를 255 - v로 반전한다. 알파는 그대로 둔다."""
    r, g, b, a = to_rgba(image).split()
    return Image.merge(
        "RGBA",
        (ImageChops.invert(r), ImageChops.invert(g), ImageChops.invert(b), a),
    )


def recolor(image: Image.Image, color: tuple[int, int, int]) -> Image.Image:
    """입력과 같은 크기의 불투명 단색 이미지를 만든다."""
    if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
        raise ValueError(f"색상 값은 0~255 범위의 RGB 3개여야 합니다: {color}")
    return Image.new("RGBA", image.size, (*color, 255))


def make_ink(background: Image.Image, color: tuple[int, int, int] | None = None) -> Image.Image:
    """텍스트에 쓸 잉크 레이어를 고른다.

    색상이 지정되면 단색, 아니면 배경을 뒤집고 반전한 이미지를 쓴다.
    """
    if color is not None:
        return recolor(background, color)
    return invert(flip(background))
