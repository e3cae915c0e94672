"""Media URLs with generated placeholders."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from castpro_console.domain.models import CastingApplication

logger = logging.getLogger(__name__)

_AVATAR_URL = "https://ui-avatars.com/api/"


@dataclass(frozen=True)
class MediaSource:
    """A media URL and the placeholder to use if it fails to load."""

    url: str
    fallback_url: str


@dataclass(frozen=True)
class VideoSource:
    label: str
    url: str
    poster_url: str


def placeholder_image(
    name: str, background: str = "c9a227", color: str = "0f0f12", size: int = 800
) -> str:
    """Generated avatar image for a name."""
    query = urlencode(
        {"name": name, "background": background, "color": color, "size": size}
    )
    return f"{_AVATAR_URL}?{query}"


@dataclass
class MediaResolver:
    """Builds storage URLs and substitutes placeholders for broken assets."""

    storage_url: str
    http_client: httpx.AsyncClient | None = None
    timeout: float = 5

    @classmethod
    def create(cls, storage_url: str, verify: bool = True) -> "MediaResolver":
        return cls(
            storage_url=storage_url,
            http_client=httpx.AsyncClient() if verify else None,
        )

    def storage_path_url(self, path: str) -> str:
        return f"{self.storage_url}/storage/{path.lstrip('/')}"

    def profile_image(self, application: CastingApplication) -> MediaSource:
        return MediaSource(
            url=self.storage_path_url(application.image_path),
            fallback_url=placeholder_image(application.full_name),
        )

    def videos(self, application: CastingApplication) -> list[VideoSource]:
        """Audition videos, preferring a direct URL over the storage path."""
        sources = []
        for index, video in enumerate(application.videos or [], start=1):
            sources.append(
                VideoSource(
                    label=f"Video {index}",
                    url=video.video_url or self.storage_path_url(video.video_path),
                    poster_url=placeholder_image(
                        f"Video {index}",
                        background="27272a",
                        color="faf5f0",
                        size=400,
                    ),
                )
            )
        return sources

    async def resolve(self, source: MediaSource) -> str:
        """Return the asset URL if it loads, otherwise its placeholder."""
        if self.http_client is None:
            return source.url
        try:
            response = await self.http_client.head(source.url, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.warning("Media unavailable at %s: %s", source.url, exc)
            return source.fallback_url
        if response.is_success:
            return source.url
        logger.warning(
            "Media unavailable at %s (HTTP %s)", source.url, response.status_code
        )
        return source.fallback_url

    async def close(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
