"""배경화면 생성기 — 랜덤 사진 위에 반전/단색 텍스트를 합성해 저장한다."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from PIL import Image

from config import ConfigError, WallpaperConfig, build_config, load_config, merge_overrides
from content.background import BackgroundFetcher
from renderer.canvas import Canvas, save_image
from renderer.effects import make_ink
from renderer.layers import LayerCompositor
from renderer.layout import Layout
from renderer.text import build_text_mask, load_font

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)


def render_mask(cfg: WallpaperConfig, canvas: Canvas) -> Image.Image:
    """폰트를 로드하고 텍스트 마스크를 만든다 (CPU 작업, 스레드에서 실행)."""
    font = load_font(cfg.font_size, cfg.dpi, cfg.font_file)
    layout = Layout(canvas.width, canvas.height, cfg.font_size, cfg.dpi)
    return build_text_mask(cfg.text, canvas, font, layout, antialias=cfg.antialias)


async def generate(cfg: WallpaperConfig, fetcher=None) -> Image.Image:
    """배경 수신과 마스크 생성을 동시에 실행한 뒤 합성한다.

    어느 쪽이든 실패하면 예외가 그대로 올라간다.
    """
    canvas = Canvas(cfg.width, cfg.height)
    if fetcher is None:
        fetcher = BackgroundFetcher(
            canvas,
            query=cfg.query,
            url=cfg.source_url,
            timeout_sec=cfg.timeout_sec,
        )

    background, mask = await asyncio.gather(
        fetcher.fetch(),
        asyncio.to_thread(render_mask, cfg, canvas),
    )
    logging.info("배경·마스크 준비 완료 (%dx%d)", canvas.width, canvas.height)

    ink = make_ink(background, cfg.color)
    return LayerCompositor(canvas).compose(background, ink, mask)


async def run(cfg: WallpaperConfig, fetcher=None) -> Path:
    """배경화면을 생성해 파일로 저장하고 경로를 반환한다."""
    frame = await generate(cfg, fetcher)
    path = save_image(frame, cfg.output)
    logging.info("저장 완료: %s (%s)", path, cfg.output_format)
    return path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="wallgen",
        description="랜덤 사진 위에 텍스트를 새긴 배경화면을 만든다.",
    )
    parser.add_argument("-w", "--width", type=int, help="이미지 폭 (기본 1920)")
    parser.add_argument("-H", "--height", type=int, help="이미지 높이 (기본 1080)")
    parser.add_argument("-o", "--output", help="출력 파일 (.png/.jpg/.jpeg)")
    parser.add_argument("-t", "--text", help="출력할 텍스트, \\n 으로 줄바꿈")
    parser.add_argument("-q", "--query", help="이미지 검색 키워드")
    parser.add_argument("-c", "--color", help="텍스트 색상 (ff0000 또는 255,0,0)")
    parser.add_argument("--font-file", help="TrueType 폰트 경로")
    parser.add_argument("--font-size", type=int, help="폰트 크기 (pt, 기본 120)")
    parser.add_argument("--dpi", type=int, help="텍스트 DPI (기본 100)")
    parser.add_argument("--no-antialias", action="store_true", help="1비트 글자 렌더링")
    parser.add_argument("--config", type=Path, help="JSON 설정 파일")
    parser.add_argument("-v", "--verbose", action="store_true", help="디버그 로그 출력")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> WallpaperConfig:
    """설정 파일 위에 명령행 인자를 덮어써서 검증된 설정을 만든다."""
    config = merge_overrides(load_config(args.config), {
        "canvas": {"width": args.width, "height": args.height},
        "output": args.output,
        "text": {
            "content": args.text,
            "color": args.color,
            "font_file": args.font_file,
            "font_size": args.font_size,
            "dpi": args.dpi,
            "antialias": False if args.no_antialias else None,
        },
        "source": {"query": args.query},
    })
    return build_config(config)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # 출력 형식·색상 검증은 네트워크 작업 전에 끝낸다
    try:
        cfg = config_from_args(args)
    except ConfigError as e:
        logging.error("설정 오류: %s", e)
        return 2

    try:
        asyncio.run(run(cfg))
    except Exception as e:
        logging.error("배경화면 생성 실패: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("종료")
