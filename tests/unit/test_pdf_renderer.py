"""
Test suite for PdfRenderer.

Tests the Playwright call sequence and error mapping with a mocked browser.

System role: Verification of the rendering step
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from quizfunnel.boundary.render.pdf_renderer import PdfRenderer
from quizfunnel.core.exceptions import RenderingError


@pytest.fixture
def mock_page() -> AsyncMock:
    """Provide mock Playwright page."""
    page = AsyncMock()
    page.pdf = AsyncMock(return_value=b"%PDF-1.7 rendered")
    return page


@pytest.fixture
def mock_browser(mock_page: AsyncMock) -> AsyncMock:
    """Provide mock Chromium browser."""
    browser = AsyncMock()
    browser.new_page = AsyncMock(return_value=mock_page)
    return browser


@pytest.fixture
def mock_playwright(mock_browser: AsyncMock) -> MagicMock:
    """Provide async_playwright() replacement yielding the mock browser."""
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=mock_browser)

    context_manager = MagicMock()
    context_manager.__aenter__ = AsyncMock(return_value=playwright)
    context_manager.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context_manager)


class TestRender:
    """Test suite for PdfRenderer.render()."""

    @pytest.mark.asyncio
    async def test_render_should_print_page_to_pdf(
        self,
        mock_playwright: MagicMock,
        mock_browser: AsyncMock,
        mock_page: AsyncMock,
    ) -> None:
        """HTML is loaded and printed with the configured format and margins."""
        # Arrange
        renderer = PdfRenderer(page_format="A4", margin="10mm", chromium_args=["--no-sandbox"])

        # Act
        with patch("quizfunnel.boundary.render.pdf_renderer.async_playwright", mock_playwright):
            pdf_bytes = await renderer.render("<h1>Report</h1>")

        # Assert
        assert pdf_bytes == b"%PDF-1.7 rendered"
        mock_page.set_content.assert_awaited_once_with("<h1>Report</h1>", wait_until="networkidle")
        pdf_kwargs = mock_page.pdf.call_args.kwargs
        assert pdf_kwargs["format"] == "A4"
        assert pdf_kwargs["print_background"] is True
        assert pdf_kwargs["margin"] == {
            "top": "10mm",
            "right": "10mm",
            "bottom": "10mm",
            "left": "10mm",
        }
        mock_browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_render_should_map_browser_errors(
        self,
        mock_playwright: MagicMock,
        mock_browser: AsyncMock,
        mock_page: AsyncMock,
    ) -> None:
        """Playwright failures become RenderingError and the browser is closed."""
        # Arrange
        mock_page.set_content.side_effect = PlaywrightError("Timeout 30000ms exceeded")

        # Act & Assert
        with patch("quizfunnel.boundary.render.pdf_renderer.async_playwright", mock_playwright):
            with pytest.raises(RenderingError):
                await PdfRenderer().render("<h1>Report</h1>")

        mock_browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_render_should_reject_empty_output(
        self, mock_playwright: MagicMock, mock_page: AsyncMock
    ) -> None:
        """An empty PDF is an error."""
        # Arrange
        mock_page.pdf.return_value = b""

        # Act & Assert
        with patch("quizfunnel.boundary.render.pdf_renderer.async_playwright", mock_playwright):
            with pytest.raises(RenderingError):
                await PdfRenderer().render("<h1>Report</h1>")
