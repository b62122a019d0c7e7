"""Image resolution for synthesized recipes.

ImageResolver walks an ordered chain of tiers and returns the first URL a
tier produces:

1. GenerativeImageTier: image model output, validated (JPEG/PNG/WEBP,
   MAX_IMAGE_SIZE_MB), optionally compressed, inlined as a data: URI
2. KeyedImageSearchTier: Google Custom Search image search (needs
   GOOGLE_SEARCH_KEY + GOOGLE_SEARCH_CX)
3. ScrapedImageSearchTier: thumbnail scraped from the public image search page

Every tier is wrapped with safe_execute_async, so a tier failure is logged and
the chain moves on. When all tiers come back empty the resolver returns None
and the caller substitutes the default placeholder.
"""

import base64
import random
import re
from io import BytesIO
from typing import Any, Optional, Protocol, Sequence

import aiohttp
import filetype
from PIL import Image

from recipe_planner.gateway.gemini import ImageGateway
from recipe_planner.prompts.prompts import get_food_photo_prompt
from recipe_planner.utils.config import config
from recipe_planner.utils.logger import logger
from recipe_planner.utils.resilience import safe_execute_async, safe_execute_sync

CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
IMAGE_SEARCH_PAGE_URL = "https://www.google.com/search"

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

THUMBNAIL_PATTERN = re.compile(r'"(https://encrypted-tbn0\.gstatic\.com/images\?q=[^"]+)"')

# Pick among the first few thumbnails for variety across recipes
SCRAPE_CANDIDATES = 5

SUPPORTED_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


# ============================================================================
# HTTP helpers
# ============================================================================


def _timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=config.IMAGE_FETCH_TIMEOUT_SECONDS)


async def fetch_json(url: str, params: dict[str, Any]) -> Any:
    """GET `url` and decode a JSON body. Raises on HTTP error status."""
    async with aiohttp.ClientSession(timeout=_timeout()) as session:
        async with session.get(url, params=params) as response:
            response.raise_for_status()
            return await response.json(content_type=None)


async def fetch_text(url: str, params: dict[str, Any], headers: Optional[dict[str, str]] = None) -> str:
    """GET `url` and return the body as text. Raises on HTTP error status."""
    async with aiohttp.ClientSession(timeout=_timeout(), headers=headers) as session:
        async with session.get(url, params=params) as response:
            response.raise_for_status()
            return await response.text()


# ============================================================================
# Image bytes helpers
# ============================================================================


def validate_image_format(image_bytes: bytes) -> bool:
    """True when the magic bytes identify a JPEG, PNG or WEBP image."""
    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in SUPPORTED_IMAGE_EXTENSIONS:
        logger.warning(f"Invalid image format: {kind}. Only JPEG, PNG and WEBP supported.")
        return False
    return True


def validate_image_size(image_bytes: bytes) -> bool:
    """True when the image fits within MAX_IMAGE_SIZE_MB."""
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


def compress_image(image_bytes: bytes, max_width: int = 1024) -> bytes:
    """Re-encode as progressive JPEG (quality 85), resizing to `max_width`.

    Images below COMPRESS_IMG_THRESHOLD_KB are returned unchanged, as is the
    original when Pillow cannot decode it.
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(f"Image size {size_kb:.1f}KB below compression threshold, skipping compression")
        return image_bytes

    def _compress() -> bytes:
        img = Image.open(BytesIO(image_bytes))

        # JPEG has no alpha channel
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode == "P":
                img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            if img.mode in ("RGBA", "LA"):
                rgb_img.paste(img, mask=img.split()[-1])
            else:
                rgb_img.paste(img)
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed = output.getvalue()
        logger.debug(f"Image compressed: {size_kb:.1f}KB -> {len(compressed) / 1024:.1f}KB")
        return compressed

    return safe_execute_sync(_compress, "Image compression", log_level="warning", default_return=image_bytes)


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


# ============================================================================
# Tiers
# ============================================================================


class ImageTier(Protocol):
    name: str

    async def fetch(self, title: str, cuisine: Optional[str] = None) -> Optional[str]: ...


class GenerativeImageTier:
    """Generate a food photo with the image model and inline it."""

    name = "generative"

    def __init__(self, gateway: ImageGateway) -> None:
        self.gateway = gateway

    async def fetch(self, title: str, cuisine: Optional[str] = None) -> Optional[str]:
        image = await self.gateway.generate(get_food_photo_prompt(title, cuisine))
        if image is None:
            return None

        data = image.data
        if not validate_image_format(data) or not validate_image_size(data):
            return None
        if config.COMPRESS_IMG:
            data = compress_image(data)

        mime_type = filetype.guess_mime(data) or image.mime_type
        return to_data_uri(data, mime_type)


class KeyedImageSearchTier:
    """First image result from Google Custom Search."""

    name = "custom-search"

    def __init__(self, api_key: str, search_engine_id: str) -> None:
        self.api_key = api_key
        self.search_engine_id = search_engine_id

    async def fetch(self, title: str, cuisine: Optional[str] = None) -> Optional[str]:
        params = {
            "q": f"{title} food",
            "cx": self.search_engine_id,
            "key": self.api_key,
            "searchType": "image",
            "num": 1,
            "safe": "active",
        }
        data = await fetch_json(CUSTOM_SEARCH_URL, params)
        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            return None
        return items[0].get("link") or None


class ScrapedImageSearchTier:
    """Thumbnail URL scraped from the public image search results page."""

    name = "scrape"

    async def fetch(self, title: str, cuisine: Optional[str] = None) -> Optional[str]:
        html = await fetch_text(
            IMAGE_SEARCH_PAGE_URL,
            {"tbm": "isch", "q": f"{title} food"},
            headers={"User-Agent": BROWSER_USER_AGENT},
        )
        matches = THUMBNAIL_PATTERN.findall(html)
        if not matches:
            return None
        url = random.choice(matches[:SCRAPE_CANDIDATES])
        # Thumbnail URLs sit inside JS string literals
        return url.replace("\\u003d", "=").replace("\\u0026", "&")


# ============================================================================
# Resolver
# ============================================================================


class ImageResolver:
    def __init__(self, tiers: Sequence[ImageTier]) -> None:
        self.tiers = list(tiers)

    async def resolve(self, title: str, cuisine: Optional[str] = None) -> Optional[str]:
        """First non-empty URL produced by the tier chain, or None."""
        for tier in self.tiers:
            url = await safe_execute_async(
                tier.fetch(title, cuisine),
                f"{tier.name} image tier failed for '{title}'",
                log_level="warning",
                default_return=None,
            )
            if url:
                logger.debug(f"Resolved image for '{title}' via {tier.name} tier")
                return url

        logger.info(f"No image found for '{title}', using placeholder")
        return None


def build_image_resolver(image_gateway: Optional[ImageGateway] = None) -> ImageResolver:
    """Tier chain enabled by configuration, in fixed priority order."""
    tiers: list[ImageTier] = []
    if config.ENABLE_IMAGE_GENERATION:
        tiers.append(GenerativeImageTier(image_gateway or ImageGateway()))
    if config.image_search_configured:
        tiers.append(KeyedImageSearchTier(config.GOOGLE_SEARCH_KEY, config.GOOGLE_SEARCH_CX))
    if config.ENABLE_IMAGE_SCRAPING:
        tiers.append(ScrapedImageSearchTier())
    logger.debug(f"Image tiers: {[tier.name for tier in tiers]}")
    return ImageResolver(tiers)
