from __future__ import annotations
import logging
import random
import re
from typing import Optional
from urllib.parse import quote

import httpx

from .settings import settings

logger = logging.getLogger(__name__)

# Style words the generator appends for the text model; the image service does better without them
_STYLE_NOISE = re.compile(r"photography style|high quality|realistic", re.IGNORECASE)


class ImageClient:
	"""Builds image-by-description URLs for picture prompts.

	The service renders on first GET, so when prefetch is enabled the URL is
	requested once and only returned if that request succeeds. Any failure
	returns ``None``; callers drop the slot.
	"""

	def __init__(
		self,
		*,
		base_url: Optional[str] = None,
		width: Optional[int] = None,
		height: Optional[int] = None,
		prefetch: Optional[bool] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.base_url = base_url or settings.image_base_url
		self.width = width or settings.image_width
		self.height = height or settings.image_height
		self.prefetch = settings.image_prefetch if prefetch is None else prefetch
		self.timeout = timeout if timeout is not None else settings.image_timeout_seconds
		self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport, follow_redirects=True)

	def build_url(self, description: str, *, seed: Optional[int] = None) -> str:
		query = _STYLE_NOISE.sub("", description).strip()
		if seed is None:
			seed = random.randint(0, 9999)
		return (
			f"{self.base_url}{quote(query, safe='')}"
			f"?width={self.width}&height={self.height}&nologo=true&seed={seed}"
		)

	async def generate(self, description: str) -> Optional[str]:
		try:
			url = self.build_url(description)
			if self.prefetch:
				r = await self._client.get(url)
				r.raise_for_status()
			return url
		except Exception as err:
			logger.warning("Image generation failed for %r: %s", description[:80], err)
			return None

	async def aclose(self) -> None:
		await self._client.aclose()
