"""
Certificate Rasterizer - Convert rendered certificate HTML to PDF or PNG

Each call launches its own headless Chromium through Playwright and tears it
down when the call ends, whether it succeeded or not. No browser is shared
between requests.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import async_playwright, Browser

from internhub.core.config import settings
from internhub.core.exceptions import RenderingError, RenderingTimeoutError
from internhub.core.logging_config import logger


PDF_OPTIONS = {
    "format": "Letter",
    "landscape": True,
    "print_background": True,
    "margin": {"top": "0", "right": "0", "bottom": "0", "left": "0"},
}

PDF_VIEWPORT = {"width": 1100, "height": 800}
PNG_VIEWPORT = {"width": 900, "height": 700}
PNG_CLIP = {"x": 0, "y": 0, "width": 900, "height": 700}


class CertificateRasterizer:
    """Headless-browser rendering of certificate documents"""

    def __init__(
        self,
        executable_path: Optional[str] = None,
        launch_args: Optional[List[str]] = None,
        timeout_seconds: Optional[float] = None,
        settle_ms: Optional[int] = None,
    ):
        self.executable_path = executable_path or settings.CHROMIUM_EXECUTABLE_PATH
        self.launch_args = launch_args if launch_args is not None else settings.CHROMIUM_ARGS
        self.timeout_seconds = timeout_seconds or settings.CERTIFICATE_RENDER_TIMEOUT_SECONDS
        self.settle_ms = settings.CERTIFICATE_SETTLE_MS if settle_ms is None else settle_ms

    @asynccontextmanager
    async def _browser(self) -> AsyncIterator[Browser]:
        """Launch Chromium for a single render; always closed on exit"""
        playwright = await async_playwright().start()
        browser = None
        try:
            launch_kwargs = {"headless": True, "args": self.launch_args}
            if self.executable_path:
                launch_kwargs["executable_path"] = self.executable_path
            browser = await playwright.chromium.launch(**launch_kwargs)
            yield browser
        finally:
            if browser is not None:
                try:
                    await browser.close()
                except Exception as e:
                    logger.warning(f"[CertificateRasterizer] Browser close failed: {e}")
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"[CertificateRasterizer] Playwright stop failed: {e}")

    async def _render_pdf(self, html: str) -> bytes:
        async with self._browser() as browser:
            page = await browser.new_page(viewport=PDF_VIEWPORT)
            await page.set_content(html, wait_until="networkidle")
            await page.evaluate("document.fonts.ready")
            await page.wait_for_timeout(self.settle_ms)
            return await page.pdf(**PDF_OPTIONS)

    async def _render_png(self, html: str) -> bytes:
        async with self._browser() as browser:
            page = await browser.new_page(viewport=PNG_VIEWPORT)
            await page.set_content(html, wait_until="networkidle")
            await page.evaluate("document.fonts.ready")
            await page.wait_for_timeout(self.settle_ms)
            return await page.screenshot(type="png", full_page=False, clip=PNG_CLIP)

    async def _run(self, render, html: str, output_format: str) -> bytes:
        try:
            data = await asyncio.wait_for(render(html), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"[CertificateRasterizer] {output_format} render timed out after {self.timeout_seconds}s")
            raise RenderingTimeoutError(self.timeout_seconds, output_format)
        except Exception as e:
            logger.error(f"[CertificateRasterizer] {output_format} render failed: {e}", exc_info=True)
            raise RenderingError(f"Failed to render certificate as {output_format}", output_format) from e

        logger.info(f"[CertificateRasterizer] Rendered {output_format} ({len(data)} bytes)")
        return data

    async def to_pdf(self, html: str) -> bytes:
        """Letter landscape PDF, zero margins, backgrounds printed"""
        return await self._run(self._render_pdf, html, "pdf")

    async def to_png(self, html: str) -> bytes:
        """900x700 PNG crop of the top-left of the page"""
        return await self._run(self._render_png, html, "png")
