"""텍스트 색상 문자열 파서."""

import re

# 10진수 토큰 구분자: 쉼표, 공백, 슬래시, 하이픈
_SEPARATORS = re.compile(r"[, /\-]+")
_HEX = re.compile(r"[0-9a-fA-F]{6}")


class ColorSpecError(ValueError):
    """색상 문자열을 해석할 수 없거나 범위를 벗어남."""


def parse_color(spec: str) -> tuple[int, int, int]:
    """색상 문자열(ff8800, #ff8800, 255,136,0, 255 136 0 등)을 RGB로 변환한다.

    6글자 16진수는 16진수로, 나머지는 구분자로 나뉜 10진수 3개로 읽는다.
    범위를 벗어난 값은 잘라내지 않고 ColorSpecError로 거부한다.
    """
    value = spec.strip()
    if value.startswith("#"):
        value = value[1:]

    if _HEX.fullmatch(value):
        return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))

    tokens = [t for t in _SEPARATORS.split(value) if t]
    if len(tokens) != 3:
        raise ColorSpecError(f"색상은 RGB 값 3개가 필요합니다: {spec!r}")
    if not all(t.isascii() and t.isdigit() for t in tokens):
        raise ColorSpecError(f"색상 값이 숫자가 아닙니다: {spec!r}")

    rgb = tuple(int(t) for t in tokens)
    for channel in rgb:
        if channel > 255:
            raise ColorSpecError(f"색상 값은 0~255 범위여야 합니다: {spec!r}")
    return rgb
