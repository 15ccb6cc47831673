"""설정 로더 모듈."""

import copy
import json
from dataclasses import dataclass
from pathlib import Path

from renderer.canvas import output_format
from renderer.color import ColorSpecError, parse_color

# 기본 설정 경로
_CONFIG_PATH = Path(__file__).parent / "config.json"

# 기본값 — config.json에 누락된 키가 있을 때 사용
_DEFAULTS = {
    "canvas": {
        "width": 1920,
        "height": 1080,
    },
    "output": "wallpaper.png",
    "text": {
        "content": "MEH",
        "color": "",
        "font_file": "",
        "font_size": 120,
        "dpi": 100,
        "antialias": True,
    },
    "source": {
        "url": "https://source.unsplash.com/random",
        "query": "",
        "timeout_sec": 30,
    },
}


class ConfigError(ValueError):
    """잘못된 설정 — 네트워크·렌더링 작업 전에 발생한다."""


@dataclass(frozen=True)
class WallpaperConfig:
    """한 번의 실행에 쓰이는 불변 설정."""
    width: int
    height: int
    output: Path
    output_format: str                        # "PNG" 또는 "JPEG"
    text: str
    font_size: int
    dpi: int
    color: tuple[int, int, int] | None = None  # None이면 반전+뒤집기
    font_file: str | None = None
    antialias: bool = True
    query: str = ""
    source_url: str = "https://source.unsplash.com/random"
    timeout_sec: float = 30


def _deep_merge(base: dict, override: dict) -> dict:
    """base 딕셔너리에 override 값을 병합한다 (깊은 병합)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: Path | None = None) -> dict:
    """설정 파일을 읽어 딕셔너리로 반환한다.

    파일이 없으면 기본값을 사용한다.
    """
    config_path = Path(path) if path else _CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                user_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"설정 파일 형식 오류: {config_path} ({e})") from e
        if not isinstance(user_config, dict):
            raise ConfigError(f"설정 파일은 JSON 객체여야 합니다: {config_path}")
        return _deep_merge(_DEFAULTS, user_config)
    return copy.deepcopy(_DEFAULTS)


def merge_overrides(config: dict, overrides: dict) -> dict:
    """None이 아닌 값만 골라 설정에 덮어쓴다 (명령행 인자용)."""
    def _clean(d: dict) -> dict:
        cleaned = {}
        for key, value in d.items():
            if isinstance(value, dict):
                value = _clean(value)
                if not value:
                    continue
            elif value is None:
                continue
            cleaned[key] = value
        return cleaned

    return _deep_merge(config, _clean(overrides))


def _positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name}은(는) 양의 정수여야 합니다: {value!r}")
    return value


def _positive_number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{name}은(는) 양수여야 합니다: {value!r}")
    return value


def _string(value, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name}은(는) 문자열이어야 합니다: {value!r}")
    return value


def _section(config: dict, name: str) -> dict:
    """설정 섹션을 꺼낸다. 빠진 키는 기본값으로 채운다."""
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"{name} 섹션은 객체여야 합니다: {section!r}")
    return _deep_merge(_DEFAULTS[name], section)


def build_config(config: dict) -> WallpaperConfig:
    """설정 딕셔너리를 검증하여 WallpaperConfig로 고정한다.

    출력 확장자, 색상, 값의 형식을 여기서 모두 확인하므로,
    실패하면 네트워크·렌더링 작업은 시작되지 않는다.
    """
    if not isinstance(config, dict):
        raise ConfigError(f"설정은 객체여야 합니다: {config!r}")
    canvas = _section(config, "canvas")
    text = _section(config, "text")
    source = _section(config, "source")

    output = Path(_string(config.get("output", _DEFAULTS["output"]), "output"))
    try:
        fmt = output_format(output)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    color = None
    if text["color"]:
        try:
            color = parse_color(_string(text["color"], "color"))
        except ColorSpecError as e:
            raise ConfigError(str(e)) from e

    font_file = text["font_file"]
    if font_file:
        _string(font_file, "font_file")

    return WallpaperConfig(
        width=_positive_int(canvas["width"], "width"),
        height=_positive_int(canvas["height"], "height"),
        output=output,
        output_format=fmt,
        text=_string(text["content"], "content"),
        font_size=_positive_int(text["font_size"], "font_size"),
        dpi=_positive_int(text["dpi"], "dpi"),
        color=color,
        font_file=font_file or None,
        antialias=bool(text["antialias"]),
        query=_string(source["query"], "query"),
        source_url=_string(source["url"], "url"),
        timeout_sec=_positive_number(source["timeout_sec"], "timeout_sec"),
    )
