"""파이프라인 테스트 — 설정 검증, 동시 생성, 저장, 종료 코드.

네트워크는 쓰지 않는다. 배경은 StubFetcher가 만든다.
"""

import asyncio
import json
from io import BytesIO

import pytest
from PIL import Image, UnidentifiedImageError

import main
from config import ConfigError, build_config, load_config, merge_overrides
from content.background import BackgroundFetcher
from renderer.canvas import Canvas
from renderer.layout import Layout
from renderer.text import build_text_mask, load_font

BG_COLOR = (0, 128, 255, 255)


class StubFetcher:
    """고정 색 배경을 돌려주는 가짜 이미지 소스."""

    calls = 0

    def __init__(self, canvas=None, **kwargs):
        self._canvas = canvas
        self.kwargs = kwargs

    async def fetch(self):
        StubFetcher.calls += 1
        return Image.new("RGBA", self._canvas.size, BG_COLOR)


class FailingFetcher:
    async def fetch(self):
        raise OSError("network down")


@pytest.fixture(autouse=True)
def _stub_network(monkeypatch):
    StubFetcher.calls = 0
    monkeypatch.setattr(main, "BackgroundFetcher", StubFetcher)


def _config(tmp_path, **text):
    base = load_config(tmp_path / "missing.json")
    return build_config(merge_overrides(base, {
        "canvas": {"width": 100, "height": 100},
        "output": str(tmp_path / "out.png"),
        "text": {"content": "AB", "font_size": 20, "dpi": 72, **text},
    }))


def test_defaults_without_config_file(tmp_path):
    cfg = build_config(load_config(tmp_path / "missing.json"))
    assert (cfg.width, cfg.height) == (1920, 1080)
    assert cfg.text == "MEH"
    assert cfg.font_size == 120
    assert cfg.dpi == 100
    assert cfg.color is None
    assert cfg.output_format == "PNG"


def test_config_file_is_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"canvas": {"width": 640}, "text": {"color": "ff0000"}}))
    cfg = build_config(load_config(path))
    assert (cfg.width, cfg.height) == (640, 1080)
    assert cfg.color == (255, 0, 0)


def test_config_is_frozen(tmp_path):
    cfg = _config(tmp_path)
    with pytest.raises(AttributeError):
        cfg.width = 5


@pytest.mark.parametrize("output, fmt", [
    ("a.png", "PNG"), ("a.PNG", "PNG"), ("a.jpg", "JPEG"), ("a.jpeg", "JPEG"),
])
def test_output_extension_selects_encoder(tmp_path, output, fmt):
    cfg = build_config(merge_overrides(load_config(tmp_path / "x.json"), {"output": output}))
    assert cfg.output_format == fmt


@pytest.mark.parametrize("overrides", [
    {"output": "pic.gif"},
    {"output": "png"},
    {"text": {"color": "300,0,0"}},
    {"text": {"color": "1,2"}},
    {"canvas": {"width": 0}},
    {"text": {"dpi": -1}},
    {"text": {"font_size": "big"}},
    {"canvas": 5},
    {"text": "hello"},
    {"source": [1, 2]},
    {"source": {"timeout_sec": "abc"}},
    {"source": {"timeout_sec": 0}},
    {"source": {"url": 42}},
    {"source": {"query": ["cats"]}},
    {"text": {"content": 7}},
    {"output": 3},
])
def test_bad_configuration_is_rejected(tmp_path, overrides):
    with pytest.raises(ConfigError):
        build_config(merge_overrides(load_config(tmp_path / "x.json"), overrides))


@pytest.mark.parametrize("content", [
    {"canvas": 5},
    {"source": {"timeout_sec": "abc"}},
    [1, 2, 3],
])
def test_malformed_config_file_aborts_before_network(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(content))
    code = main.main(["-o", str(tmp_path / "a.png"), "--config", str(path)])
    assert code == 2
    assert StubFetcher.calls == 0
    assert not (tmp_path / "a.png").exists()


def test_timeout_accepts_float(tmp_path):
    cfg = build_config(merge_overrides(load_config(tmp_path / "x.json"),
                                       {"source": {"timeout_sec": 2.5}}))
    assert cfg.timeout_sec == 2.5


def test_gif_output_aborts_before_network(tmp_path):
    code = main.main(["-o", str(tmp_path / "pic.gif"), "--config", str(tmp_path / "x.json")])
    assert code == 2
    assert StubFetcher.calls == 0
    assert not (tmp_path / "pic.gif").exists()


def test_bad_color_aborts_before_network(tmp_path):
    code = main.main(["-o", str(tmp_path / "a.png"), "-c", "256,0,0",
                      "--config", str(tmp_path / "x.json")])
    assert code == 2
    assert StubFetcher.calls == 0
    assert not (tmp_path / "a.png").exists()


def test_generate_keeps_canvas_size(tmp_path):
    cfg = _config(tmp_path)
    frame = asyncio.run(main.generate(cfg, StubFetcher(Canvas(100, 100))))
    assert frame.size == (100, 100)
    assert frame.mode == "RGBA"


def test_red_text_over_untouched_background(tmp_path):
    cfg = _config(tmp_path, color="255,0,0", antialias=False)
    frame = asyncio.run(main.generate(cfg, StubFetcher(Canvas(100, 100))))

    canvas = Canvas(100, 100)
    mask = build_text_mask("AB", canvas, load_font(20, 72), Layout(100, 100, 20, 72),
                           antialias=False)
    alpha = mask.getchannel("A")
    covered = 0
    for y in range(100):
        for x in range(100):
            if alpha.getpixel((x, y)) == 255:
                assert frame.getpixel((x, y)) == (255, 0, 0, 255)
                covered += 1
            else:
                assert frame.getpixel((x, y)) == BG_COLOR
    assert covered > 0


def test_default_ink_is_inverted_background(tmp_path):
    cfg = _config(tmp_path, antialias=False)
    frame = asyncio.run(main.generate(cfg, StubFetcher(Canvas(100, 100))))
    colors = {color for _, color in frame.getcolors()}
    assert colors == {BG_COLOR, (255, 127, 0, 255)}


def test_fetch_failure_propagates(tmp_path):
    cfg = _config(tmp_path)
    with pytest.raises(OSError):
        asyncio.run(main.run(cfg, FailingFetcher()))
    assert not cfg.output.exists()


def test_missing_font_file_propagates(tmp_path):
    cfg = _config(tmp_path, font_file=str(tmp_path / "nope.ttf"))
    with pytest.raises(OSError):
        asyncio.run(main.generate(cfg, StubFetcher(Canvas(100, 100))))


@pytest.mark.parametrize("name, fmt", [("wall.png", "PNG"), ("wall.jpg", "JPEG")])
def test_main_writes_file(tmp_path, name, fmt):
    out = tmp_path / name
    code = main.main(["-w", "120", "-H", "80", "-t", "Hi\\nthere", "-o", str(out),
                      "--font-size", "12", "--dpi", "96",
                      "--config", str(tmp_path / "x.json")])
    assert code == 0
    assert StubFetcher.calls == 1
    with Image.open(out) as img:
        assert img.format == fmt
        assert img.size == (120, 80)


def test_main_reports_acquisition_failure(tmp_path, monkeypatch):
    class Broken(StubFetcher):
        async def fetch(self):
            raise OSError("decode failed")

    monkeypatch.setattr(main, "BackgroundFetcher", Broken)
    out = tmp_path / "a.png"
    assert main.main(["-o", str(out), "--config", str(tmp_path / "x.json")]) == 1
    assert not out.exists()


def test_fetcher_url_and_decode_resize():
    canvas = Canvas(40, 30)
    fetcher = BackgroundFetcher(canvas, query="red cars", url="https://img.example/random/")
    assert fetcher.url == "https://img.example/random/40x30/?red+cars"

    buf = BytesIO()
    Image.new("RGB", (80, 60), (10, 20, 30)).save(buf, "PNG")
    img = fetcher.decode(buf.getvalue())
    assert img.size == (40, 30)
    assert img.mode == "RGBA"
    assert img.getpixel((5, 5)) == (10, 20, 30, 255)


def test_fetcher_rejects_garbage():
    with pytest.raises(UnidentifiedImageError):
        BackgroundFetcher(Canvas(4, 4)).decode(b"not an image")
