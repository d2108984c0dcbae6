"""
Unit Tests for CertificateRasterizer

Playwright is replaced with mocks; no browser is launched.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from internhub.core.exceptions import RenderingError, RenderingTimeoutError
from internhub.services.certificate_rasterizer import (
    CertificateRasterizer,
    PDF_OPTIONS,
    PDF_VIEWPORT,
    PNG_CLIP,
    PNG_VIEWPORT,
)

HTML = "<html><body>certificate</body></html>"


@pytest.fixture
def browser_stack():
    """Mocked playwright -> browser -> page chain"""
    page = AsyncMock()
    page.pdf.return_value = b"%PDF-1.4"
    page.screenshot.return_value = b"\x89PNG"

    browser = AsyncMock()
    browser.new_page.return_value = page

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    manager = MagicMock()
    manager.start = AsyncMock(return_value=playwright)

    with patch("internhub.services.certificate_rasterizer.async_playwright", return_value=manager):
        yield playwright, browser, page


@pytest.fixture
def rasterizer() -> CertificateRasterizer:
    return CertificateRasterizer(
        executable_path="/usr/bin/chromium",
        launch_args=["--no-sandbox"],
        timeout_seconds=5,
        settle_ms=0,
    )


class TestPdf:

    async def test_renders_letter_landscape(self, rasterizer, browser_stack):
        playwright, browser, page = browser_stack

        result = await rasterizer.to_pdf(HTML)

        assert result == b"%PDF-1.4"
        playwright.chromium.launch.assert_awaited_once_with(
            headless=True, args=["--no-sandbox"], executable_path="/usr/bin/chromium"
        )
        browser.new_page.assert_awaited_once_with(viewport=PDF_VIEWPORT)
        page.set_content.assert_awaited_once_with(HTML, wait_until="networkidle")
        page.pdf.assert_awaited_once_with(**PDF_OPTIONS)

    async def test_browser_torn_down_after_success(self, rasterizer, browser_stack):
        playwright, browser, _ = browser_stack

        await rasterizer.to_pdf(HTML)

        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()


class TestPng:

    async def test_renders_clipped_screenshot(self, rasterizer, browser_stack):
        _, browser, page = browser_stack

        result = await rasterizer.to_png(HTML)

        assert result == b"\x89PNG"
        browser.new_page.assert_awaited_once_with(viewport=PNG_VIEWPORT)
        page.screenshot.assert_awaited_once_with(type="png", full_page=False, clip=PNG_CLIP)


class TestFontSettling:

    @pytest.mark.parametrize("output_format", ["pdf", "png"])
    async def test_waits_for_fonts_then_settles(self, browser_stack, output_format):
        _, _, page = browser_stack
        rasterizer = CertificateRasterizer(timeout_seconds=5, settle_ms=250)

        await getattr(rasterizer, f"to_{output_format}")(HTML)

        page.evaluate.assert_awaited_once_with("document.fonts.ready")
        page.wait_for_timeout.assert_awaited_once_with(250)


class TestFailures:

    async def test_page_error_becomes_rendering_error(self, rasterizer, browser_stack):
        playwright, browser, page = browser_stack
        page.set_content.side_effect = PlaywrightError("net::ERR_FAILED")

        with pytest.raises(RenderingError) as exc_info:
            await rasterizer.to_png(HTML)

        assert exc_info.value.details["format"] == "png"
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    async def test_launch_failure_still_stops_playwright(self, rasterizer, browser_stack):
        playwright, browser, _ = browser_stack
        playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")

        with pytest.raises(RenderingError):
            await rasterizer.to_pdf(HTML)

        browser.close.assert_not_awaited()
        playwright.stop.assert_awaited_once()

    async def test_timeout(self, browser_stack):
        playwright, browser, page = browser_stack

        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        page.set_content.side_effect = hang
        rasterizer = CertificateRasterizer(timeout_seconds=0.05, settle_ms=0)

        with pytest.raises(RenderingTimeoutError) as exc_info:
            await rasterizer.to_pdf(HTML)

        assert exc_info.value.code == "RENDERING_TIMEOUT"
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    async def test_close_error_does_not_mask_result(self, rasterizer, browser_stack):
        _, browser, _ = browser_stack
        browser.close.side_effect = PlaywrightError("Target closed")

        assert await rasterizer.to_pdf(HTML) == b"%PDF-1.4"

    async def test_stop_error_does_not_mask_result(self, rasterizer, browser_stack):
        playwright, _, _ = browser_stack
        playwright.stop.side_effect = RuntimeError("driver already gone")

        assert await rasterizer.to_png(HTML) == b"\x89PNG"

    async def test_driver_start_failure_becomes_rendering_error(self, rasterizer):
        manager = MagicMock()
        manager.start = AsyncMock(side_effect=RuntimeError("driver missing"))

        with patch("internhub.services.certificate_rasterizer.async_playwright", return_value=manager):
            with pytest.raises(RenderingError) as exc_info:
                await rasterizer.to_pdf(HTML)

        assert exc_info.value.details["format"] == "pdf"
