"""배경 이미지 모듈 — 원격 이미지 소스에서 랜덤 사진을 받아온다."""

import logging
from io import BytesIO
from urllib.parse import quote_plus
from PIL import Image

from renderer.canvas import Canvas

logger = logging.getLogger(__name__)


class BackgroundFetcher:
    """원격 소스에서 캔버스 크기의 배경 사진을 받아 RGBA로 디코딩한다."""

    DEFAULT_URL = "https://source.unsplash.com/random"

    def __init__(self, canvas: Canvas, query: str = "", url: str = DEFAULT_URL,
                 timeout_sec: float = 30):
        self._canvas = canvas
        self._query = query
        self._url = url.rstrip("/")
        self._timeout = timeout_sec

    @property
    def url(self) -> str:
        """요청 URL — {base}/{w}x{h}/?{query}"""
        return f"{self._url}/{self._canvas.width}x{self._canvas.height}/?{quote_plus(self._query)}"

    async def fetch(self) -> Image.Image:
        """사진을 내려받아 캔버스 크기 RGBA 이미지로 반환한다.

        네트워크·HTTP 오류와 디코딩 오류는 그대로 올라간다 (재시도 없음).
        """
        import aiohttp

        logger.info("배경 이미지 요청: %s", self.url)
        async with aiohttp.ClientSession() as session:
            async with session.get(self.url,
                                   timeout=aiohttp.ClientTimeout(total=self._timeout)) as resp:
                resp.raise_for_status()
                data = await resp.read()

        logger.info("배경 이미지 수신: %d bytes", len(data))
        return self.decode(data)

    def decode(self, data: bytes) -> Image.Image:
        """인코딩된 이미지 바이트를 캔버스 크기 RGBA로 변환한다."""
        img = Image.open(BytesIO(data))
        img.load()
        if img.size != self._canvas.size:
            logger.info("배경 리사이즈: %dx%d → %dx%d",
                        img.width, img.height, self._canvas.width, self._canvas.height)
        return self._canvas.fit(img)
