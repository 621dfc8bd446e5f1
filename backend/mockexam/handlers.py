"""Framework-neutral entry point for serverless hosts.

``dispatch`` takes a request path and decoded JSON body and returns
``(status_code, payload)`` using the same orchestration functions and error
mapping as the FastAPI routers.

``handle`` wraps it for HTTP-proxy style function hosts. Point the host at
``mockexam.handlers.handle``; it receives an event with ``path`` (or
``rawPath``) and a JSON ``body`` and returns ``statusCode``/``headers``/``body``.
"""
from __future__ import annotations
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from .dependencies import API_KEY_MISSING
from .exceptions import ExamServiceError
from .gemini_client import GeminiClient
from .generator import ImageSource, TextModel, generate_exam
from .image_client import ImageClient
from .marking import mark_exam
from .models import (
	AnalyzeTextRequest,
	EvaluateWritingRequest,
	GenerateExamRequest,
	MarkExamRequest,
	ModelAnswersRequest,
	PracticeSetRequest,
)
from .study import analyze_text, evaluate_writing, generate_model_answers, generate_practice_set

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, Any]]


async def _generate_exam(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = GenerateExamRequest.model_validate(body)
	paper = await generate_exam(req.type, client=client, images=images)
	return paper.model_dump(by_alias=True, mode="json", exclude_none=True)


async def _mark_exam(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = MarkExamRequest.model_validate(body)
	result = await mark_exam(req.paper, req.answers, client=client)
	return result.model_dump(by_alias=True, mode="json")


async def _model_answers(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = ModelAnswersRequest.model_validate(body)
	return {"text": await generate_model_answers(req.paper, client=client)}


async def _analyze_text(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = AnalyzeTextRequest.model_validate(body)
	return await analyze_text(req.text, client=client)


async def _evaluate_writing(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = EvaluateWritingRequest.model_validate(body)
	return await evaluate_writing(req.text, req.target_method, client=client)


async def _practice_set(body: Dict[str, Any], client: TextModel, images: ImageSource) -> Dict[str, Any]:
	req = PracticeSetRequest.model_validate(body)
	return await generate_practice_set(req.topic, req.difficulty, req.num_questions, client=client)


ROUTES: Dict[str, Callable[[Dict[str, Any], TextModel, ImageSource], Awaitable[Dict[str, Any]]]] = {
	"/generate-exam": _generate_exam,
	"/mark-exam": _mark_exam,
	"/model-answers": _model_answers,
	"/analyze-text": _analyze_text,
	"/evaluate-writing": _evaluate_writing,
	"/generate-practice-set": _practice_set,
}


async def dispatch(
	path: str,
	body: Optional[Dict[str, Any]],
	*,
	client: Optional[TextModel] = None,
	images: Optional[ImageSource] = None,
) -> Response:
	route = path[len("/api"):] if path.startswith("/api/") else path
	handler = ROUTES.get(route)
	if handler is None:
		return 404, {"detail": "API endpoint not found"}

	owned = []
	try:
		if client is None:
			try:
				client = GeminiClient()
			except ValueError:
				logger.error("Gemini API key is missing on server.")
				return 500, {"detail": API_KEY_MISSING}
			owned.append(client)
		if images is None:
			images = ImageClient()
			owned.append(images)
		return 200, await handler(body or {}, client, images)
	except ValidationError as e:
		return 422, {"detail": e.errors(include_url=False, include_context=False)}
	except ExamServiceError as e:
		return 500, {"detail": str(e)}
	finally:
		for resource in owned:
			await resource.aclose()


def _event_body(event: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
	body = event.get("body")
	if body is None or isinstance(body, dict):
		return body
	if isinstance(body, (bytes, bytearray)):
		body = body.decode("utf-8")
	if not isinstance(body, str):
		raise ValueError("request body must be JSON text")
	decoded = json.loads(body) if body.strip() else None
	if decoded is not None and not isinstance(decoded, dict):
		raise ValueError("request body must be a JSON object")
	return decoded


def handle(event: Mapping[str, Any]) -> Dict[str, Any]:
	"""Synchronous function-host entry point around ``dispatch``."""
	path = event.get("rawPath") or event.get("path") or "/"
	try:
		body = _event_body(event)
	except ValueError as e:
		# json.JSONDecodeError is a ValueError
		logger.warning("Rejected request body for %s: %s", path, e)
		status, payload = 400, {"detail": "Invalid JSON body"}
	else:
		status, payload = asyncio.run(dispatch(path, body))
	return {
		"statusCode": status,
		"headers": {"Content-Type": "application/json"},
		"body": json.dumps(payload),
	}
