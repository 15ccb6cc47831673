"""텍스트 마스크 모듈 — 여러 줄 텍스트를 캔버스 크기 커버리지 마스크로 렌더링.

기본 폰트는 패키지에 포함된 fonts/DejaVuSans-Bold.ttf 이다.
"""

import logging
from pathlib import Path
from PIL import Image, ImageDraw, ImageFont

from .canvas import Canvas
from .layout import Layout, split_lines

logger = logging.getLogger(__name__)

# 번들 기본 폰트 경로 (패키지 데이터)
_FONT_DIR = Path(__file__).parent / "fonts"
DEFAULT_FONT = _FONT_DIR / "DejaVuSans-Bold.ttf"

# 폰트 캐시
_font_cache: dict[tuple[str, float], ImageFont.FreeTypeFont] = {}


def pixel_size(font_size: int, dpi: int) -> float:
    """포인트 크기와 DPI로 폰트 픽셀 크기를 구한다."""
    return font_size * dpi / 72


def load_font(font_size: int, dpi: int, font_file: str | None = None) -> ImageFont.FreeTypeFont:
    """폰트를 로드한다 (캐싱).

    font_file이 없으면 번들 폰트를 쓴다. 폰트 파일을 읽거나 해석할 수 없으면
    OSError가 그대로 올라간다.
    """
    size = pixel_size(font_size, dpi)
    path = str(font_file) if font_file else str(DEFAULT_FONT)

    key = (path, size)
    if key not in _font_cache:
        _font_cache[key] = ImageFont.truetype(path, size)
        logger.debug("폰트 로드: %s (%.1fpx)", path, size)
    return _font_cache[key]


def build_text_mask(
    text: str,
    canvas: Canvas,
    font: ImageFont.FreeTypeFont,
    layout: Layout,
    antialias: bool = True,
) -> Image.Image:
    """텍스트를 캔버스 크기의 흰색-투명 RGBA 마스크로 렌더링한다.

    알파 채널이 글자 커버리지다. 빈 텍스트는 완전히 투명한 마스크가 된다.

    Args:
        layout: 줄 위치 계산기 (기준선 y, 줄별 가운데 정렬 x)
        antialias: False면 1비트로 렌더링
    """
    coverage = canvas.new(0, mode="L")
    draw = ImageDraw.Draw(coverage)
    if not antialias:
        draw.fontmode = "1"

    for line, (x, y) in layout.compose(split_lines(text), font.getlength):
        if not line:
            continue
        # 기준선 왼쪽("ls") 앵커로 그린다
        draw.text((x, y), line, font=font, fill=255, anchor="ls")

    mask = canvas.new((255, 255, 255, 0))
    mask.putalpha(coverage)
    return mask
