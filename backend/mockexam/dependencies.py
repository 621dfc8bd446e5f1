from __future__ import annotations
import logging
from typing import AsyncIterator

from fastapi import HTTPException

from .gemini_client import GeminiClient
from .image_client import ImageClient

logger = logging.getLogger(__name__)

API_KEY_MISSING = "Server misconfiguration: API key missing."


async def get_text_model() -> AsyncIterator[GeminiClient]:
	try:
		client = GeminiClient()
	except ValueError:
		logger.error("Gemini API key is missing on server.")
		raise HTTPException(status_code=500, detail=API_KEY_MISSING)
	try:
		yield client
	finally:
		await client.aclose()


async def get_image_client() -> AsyncIterator[ImageClient]:
	client = ImageClient()
	try:
		yield client
	finally:
		await client.aclose()
