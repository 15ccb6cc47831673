"""레이어 합성 모듈 — 배경 + 잉크 레이어 + 텍스트 마스크."""

from PIL import Image, ImageChops
from .canvas import Canvas, to_rgba


class LayerCompositor:
    """마스크를 알파 스텐실로 써서 잉크 레이어를 배경 위에 합성한다."""

    def __init__(self, canvas: Canvas):
        self._canvas = canvas

    def compose(
        self,
        background: Image.Image,
        ink: Image.Image,
        mask: Image.Image,
    ) -> Image.Image:
        """배경 복사본 위에 잉크를 "over" 합성한 RGBA 이미지를 반환한다.

        Args:
            background: 캔버스 크기 배경 이미지
            ink: 캔버스 크기 잉크 레이어 (effects 모듈 결과)
            mask: 알파가 커버리지인 RGBA 마스크 또는 L 모드 커버리지

        Returns:
            마스크 알파 0인 곳은 배경 그대로, 255인 곳은 잉크 색인 이미지
        """
        background = to_rgba(background)
        ink = to_rgba(ink)
        self._canvas.check(background, ink, mask)

        # 배경 레이어
        frame = background.copy()

        # 잉크 레이어: 잉크 알파 × 마스크 커버리지
        coverage = mask if mask.mode == "L" else mask.getchannel("A")
        layer = ink.copy()
        layer.putalpha(ImageChops.multiply(ink.getchannel("A"), coverage))

        frame.alpha_composite(layer)
        return frame
