from __future__ import annotations
import asyncio
import logging
import httpx
from typing import Any, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self.timeout = timeout if timeout is not None else settings.model_timeout_seconds
		self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

	async def generate(self, prompt: str, *, json_output: bool = False) -> str:
		"""Send a single-turn prompt and return the first candidate's text.

		With ``json_output`` the model is asked for ``application/json``; the
		text is still untrusted and must go through ``extract_json``.
		"""
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		if json_output:
			payload["generationConfig"] = {"responseMimeType": "application/json"}
		# httpx timeouts are per network operation; bound the whole call as well
		return await asyncio.wait_for(self._post_payload(payload), timeout=self.timeout)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
		logger.debug("Gemini %s responded %s", self.model, r.status_code)
		r.raise_for_status()
		try:
			data = r.json()
			return data["candidates"][0]["content"]["parts"][0]["text"]
		except Exception as err:
			raise RuntimeError(f"Unexpected Gemini response: {r.text[:500]}") from err

	async def aclose(self) -> None:
		await self._client.aclose()
