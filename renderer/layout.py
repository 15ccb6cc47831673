"""화면 레이아웃 모듈 — 여러 줄 텍스트의 위치를 계산한다."""

from typing import Callable


def split_lines(text: str) -> list[str]:
    """텍스트를 줄 단위로 나눈다. 실제 줄바꿈과 리터럴 \\n 을 모두 인식한다."""
    return text.replace("\\n", "\n").split("\n")


def line_height(font_size: int, dpi: int) -> int:
    """포인트 크기를 DPI 기준 픽셀 줄 높이로 변환한다 (72pt = 1inch)."""
    return font_size * dpi // 72


class Layout:
    """캔버스 중앙에 텍스트 블록을 배치한다."""

    def __init__(self, width: int, height: int, font_size: int, dpi: int):
        self._width = width
        self._height = height
        self._line_height = line_height(font_size, dpi)

    @property
    def line_height(self) -> int:
        return self._line_height

    def baselines(self, count: int) -> list[float]:
        """줄 count개의 기준선 y 좌표를 반환한다.

        블록 전체가 세로 중앙에 오도록 시작점을 잡고, 첫 기준선은
        시작점에서 한 줄 높이만큼 아래에 둔다.
        """
        start_y = (self._height - count * self._line_height) / 2
        return [start_y + self._line_height * (i + 1) for i in range(count)]

    def compose(self, lines: list[str],
                measure: Callable[[str], float]) -> list[tuple[str, tuple[float, float]]]:
        """각 줄의 (텍스트, (x, 기준선 y)) 리스트를 반환한다.

        x는 줄마다 자기 폭 기준으로 따로 가운데 정렬한다.
        """
        overlays = []
        for line, y in zip(lines, self.baselines(len(lines))):
            x = (self._width - measure(line)) / 2
            overlays.append((line, (x, y)))
        return overlays
