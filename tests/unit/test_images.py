"""Unit tests for image tiers and the cascading resolver."""

import base64
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch

import filetype
import pytest
from PIL import Image

from recipe_planner.gateway.gemini import GeneratedImage
from recipe_planner.tools.images import (
    CUSTOM_SEARCH_URL,
    GenerativeImageTier,
    ImageResolver,
    KeyedImageSearchTier,
    ScrapedImageSearchTier,
    build_image_resolver,
    compress_image,
    to_data_uri,
    validate_image_format,
    validate_image_size,
)
from recipe_planner.utils.errors import GatewayError


def png_bytes(width=64, height=48, mode="RGB") -> bytes:
    output = BytesIO()
    color = (200, 120, 40, 255) if mode == "RGBA" else (200, 120, 40)
    Image.new(mode, (width, height), color).save(output, format="PNG")
    return output.getvalue()


def fake_tier(name, result=None, error=None):
    tier = MagicMock()
    tier.name = name
    tier.fetch = AsyncMock(return_value=result, side_effect=error)
    return tier


class TestImageHelpers:
    def test_validate_image_format(self):
        assert validate_image_format(png_bytes()) is True
        assert validate_image_format(b"definitely not an image") is False

    def test_validate_image_size(self, pinned_config):
        assert validate_image_size(png_bytes()) is True
        pinned_config.MAX_IMAGE_SIZE_MB = 0
        assert validate_image_size(png_bytes()) is False

    def test_small_images_not_compressed(self):
        data = png_bytes()
        assert compress_image(data) is data

    def test_compress_converts_to_jpeg_and_resizes(self, pinned_config):
        pinned_config.COMPRESS_IMG_THRESHOLD_KB = 0
        compressed = compress_image(png_bytes(width=2048, height=1024, mode="RGBA"))

        assert filetype.guess(compressed).extension == "jpg"
        assert Image.open(BytesIO(compressed)).size == (1024, 512)

    def test_compress_returns_original_on_decode_failure(self, pinned_config):
        pinned_config.COMPRESS_IMG_THRESHOLD_KB = 0
        data = b"\x89PNG\r\n\x1a\n-truncated"
        assert compress_image(data) == data

    def test_to_data_uri(self):
        uri = to_data_uri(b"abc", "image/png")
        assert uri == f"data:image/png;base64,{base64.b64encode(b'abc').decode()}"


class TestGenerativeImageTier:
    @pytest.mark.asyncio
    async def test_inlines_generated_png(self):
        gateway = MagicMock()
        gateway.generate = AsyncMock(return_value=GeneratedImage(data=png_bytes(), mime_type="image/png"))

        url = await GenerativeImageTier(gateway).fetch("Masala Dosa", "indian")

        assert url.startswith("data:image/png;base64,")
        prompt = gateway.generate.await_args.args[0]
        assert "Masala Dosa" in prompt
        assert "indian cuisine" in prompt

    @pytest.mark.asyncio
    async def test_large_images_compressed_to_jpeg(self, pinned_config):
        pinned_config.COMPRESS_IMG_THRESHOLD_KB = 0
        gateway = MagicMock()
        gateway.generate = AsyncMock(return_value=GeneratedImage(data=png_bytes(), mime_type="image/png"))

        url = await GenerativeImageTier(gateway).fetch("Masala Dosa")

        assert url.startswith("data:image/jpeg;base64,")

    @pytest.mark.asyncio
    async def test_no_image_returns_none(self):
        gateway = MagicMock()
        gateway.generate = AsyncMock(return_value=None)
        assert await GenerativeImageTier(gateway).fetch("Masala Dosa") is None

    @pytest.mark.asyncio
    async def test_unsupported_bytes_return_none(self):
        gateway = MagicMock()
        gateway.generate = AsyncMock(return_value=GeneratedImage(data=b"GIF89a....", mime_type="image/gif"))
        assert await GenerativeImageTier(gateway).fetch("Masala Dosa") is None


class TestSearchTiers:
    @pytest.mark.asyncio
    async def test_keyed_search_returns_first_link(self):
        with patch("recipe_planner.tools.images.fetch_json", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = {"items": [{"link": "https://img.example/dal.jpg"}, {"link": "https://img.example/2.jpg"}]}

            url = await KeyedImageSearchTier("key", "cx").fetch("Red Lentil Dal")

        assert url == "https://img.example/dal.jpg"
        called_url, params = mock_fetch.await_args.args
        assert called_url == CUSTOM_SEARCH_URL
        assert params["q"] == "Red Lentil Dal food"
        assert params["searchType"] == "image"
        assert params["num"] == 1
        assert params["safe"] == "active"

    @pytest.mark.asyncio
    async def test_keyed_search_without_items_returns_none(self):
        with patch("recipe_planner.tools.images.fetch_json", new_callable=AsyncMock, return_value={"kind": "customsearch"}):
            assert await KeyedImageSearchTier("key", "cx").fetch("Red Lentil Dal") is None

    @pytest.mark.asyncio
    async def test_scrape_picks_among_first_five_thumbnails(self):
        thumbs = [f"https://encrypted-tbn0.gstatic.com/images?q=tbn:thumb{idx}" for idx in range(8)]
        html = "<html>" + "".join(f'<script>["{url}",200,300]</script>' for url in thumbs) + "</html>"

        with patch("recipe_planner.tools.images.fetch_text", new_callable=AsyncMock, return_value=html) as mock_fetch:
            url = await ScrapedImageSearchTier().fetch("Red Lentil Dal")

        assert url in thumbs[:5]
        params = mock_fetch.await_args.args[1]
        assert params == {"tbm": "isch", "q": "Red Lentil Dal food"}
        assert "User-Agent" in mock_fetch.await_args.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_scrape_unescapes_thumbnail_urls(self):
        html = '"https://encrypted-tbn0.gstatic.com/images?q\\u003dtbn:abc\\u0026s\\u003d10"'
        with patch("recipe_planner.tools.images.fetch_text", new_callable=AsyncMock, return_value=html):
            url = await ScrapedImageSearchTier().fetch("Dal")
        assert url == "https://encrypted-tbn0.gstatic.com/images?q=tbn:abc&s=10"

    @pytest.mark.asyncio
    async def test_scrape_without_matches_returns_none(self):
        with patch("recipe_planner.tools.images.fetch_text", new_callable=AsyncMock, return_value="<html></html>"):
            assert await ScrapedImageSearchTier().fetch("Dal") is None


class TestImageResolver:
    @pytest.mark.asyncio
    async def test_first_successful_tier_wins(self):
        first = fake_tier("generative", result="data:image/png;base64,AAA")
        second = fake_tier("scrape", result="https://thumb")

        assert await ImageResolver([first, second]).resolve("Dal") == "data:image/png;base64,AAA"
        second.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cascade_falls_through_to_scrape(self):
        """Generation fails, search tier unconfigured, scrape supplies the image."""
        generative = fake_tier("generative", error=GatewayError("quota"))
        scrape = fake_tier("scrape", result="https://encrypted-tbn0.gstatic.com/images?q=tbn:1")

        url = await ImageResolver([generative, scrape]).resolve("Dal", "indian")

        assert url == "https://encrypted-tbn0.gstatic.com/images?q=tbn:1"
        generative.fetch.assert_awaited_once_with("Dal", "indian")

    @pytest.mark.asyncio
    async def test_all_tiers_empty_or_failing_returns_none(self):
        tiers = [
            fake_tier("generative", error=GatewayError("quota")),
            fake_tier("custom-search", result=None),
            fake_tier("scrape", error=RuntimeError("blocked")),
        ]
        assert await ImageResolver(tiers).resolve("Dal") is None

    def test_build_resolver_default_tiers(self):
        resolver = build_image_resolver(MagicMock())
        assert [tier.name for tier in resolver.tiers] == ["generative", "scrape"]

    def test_build_resolver_with_search_credentials(self, pinned_config):
        pinned_config.GOOGLE_SEARCH_KEY = "key"
        pinned_config.GOOGLE_SEARCH_CX = "cx"
        resolver = build_image_resolver(MagicMock())
        assert [tier.name for tier in resolver.tiers] == ["generative", "custom-search", "scrape"]

    def test_build_resolver_respects_disabled_tiers(self, pinned_config):
        pinned_config.ENABLE_IMAGE_GENERATION = False
        pinned_config.ENABLE_IMAGE_SCRAPING = False
        assert build_image_resolver(MagicMock()).tiers == []
