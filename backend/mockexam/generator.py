from __future__ import annotations
import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from .exceptions import ExamGenerationError, ModelOutputError
from .json_extract import parse_json_object
from .models import ExamPaper, PaperType, Question
from .prompts import build_generation_prompt
from .settings import settings

logger = logging.getLogger(__name__)

TIME_LIMIT_MINUTES: Dict[PaperType, int] = {PaperType.PAPER_1: 105, PaperType.PAPER_2: 125}
EXPECTED_SOURCES: Dict[PaperType, int] = {PaperType.PAPER_1: 1, PaperType.PAPER_2: 2}

# Paper 1 picture-prompt writing task
IMAGE_QUESTION_NUMBER = "6"
DEFAULT_IMAGE_DESCRIPTION = "A dramatic landscape"
IMAGE_STYLE_SUFFIX = "Atmospheric, detailed, high quality."


class TextModel(Protocol):
	async def generate(self, prompt: str, *, json_output: bool = False) -> str: ...


class ImageSource(Protocol):
	async def generate(self, description: str) -> Optional[str]: ...


def _coerce_paper_payload(data: Dict[str, Any]) -> Dict[str, Any]:
	payload = dict(data)
	for key in ("questions", "sources"):
		if not isinstance(payload.get(key), list):
			payload[key] = []
	return payload


def image_descriptions(question: Question) -> List[str]:
	desc1 = question.image_prompt_description or DEFAULT_IMAGE_DESCRIPTION
	desc2 = question.image_prompt_description2 or f"a close-up detail of {desc1}"
	return [desc1, desc2]


async def _fetch_image(images: ImageSource, description: str, timeout: float) -> Optional[str]:
	try:
		return await asyncio.wait_for(images.generate(f"{description}. {IMAGE_STYLE_SUFFIX}"), timeout=timeout)
	except Exception as err:
		logger.warning("Image slot dropped for %r: %r", description[:80], err)
		return None


async def attach_images(question: Question, images: ImageSource, *, timeout: Optional[float] = None) -> None:
	"""Request one image per description concurrently; keep successful URLs in slot order."""
	timeout = settings.image_timeout_seconds if timeout is None else timeout
	descriptions = image_descriptions(question)
	# Marking reads these back to describe the image the student picked
	question.image_prompt_description, question.image_prompt_description2 = descriptions
	urls = await asyncio.gather(*(_fetch_image(images, d, timeout) for d in descriptions))
	question.images = [url for url in urls if url]
	if len(question.images) < len(urls):
		logger.warning("Question %s: %d of %d images generated", question.number, len(question.images), len(urls))


def decode_paper(data: Dict[str, Any], paper_type: PaperType, paper_id: str) -> ExamPaper:
	payload = _coerce_paper_payload(data)
	payload.update(id=paper_id, type=paper_type.value, timeLimitMinutes=TIME_LIMIT_MINUTES[paper_type])
	payload.pop("paperType", None)
	payload.pop("time_limit_minutes", None)
	try:
		paper = ExamPaper.model_validate(payload)
	except ValidationError as err:
		raise ModelOutputError(f"Generated paper does not match the schema: {err}") from err
	if len(paper.sources) != EXPECTED_SOURCES[paper_type]:
		logger.warning(
			"%s generated with %d sources (expected %d)",
			paper_type.value, len(paper.sources), EXPECTED_SOURCES[paper_type],
		)
	return paper


async def generate_exam(
	paper_type: PaperType | str,
	*,
	client: TextModel,
	images: ImageSource,
	paper_id: Optional[str] = None,
) -> ExamPaper:
	paper_type = PaperType(paper_type)
	prompt = build_generation_prompt(paper_type)
	logger.info("Generating %s exam", paper_type.value)
	try:
		raw = await client.generate(prompt, json_output=True)
		paper = decode_paper(parse_json_object(raw), paper_type, paper_id or uuid.uuid4().hex)
		if paper_type is PaperType.PAPER_1:
			image_question = next((q for q in paper.questions if q.number == IMAGE_QUESTION_NUMBER), None)
			if image_question is not None:
				await attach_images(image_question, images)
	except Exception as err:
		logger.exception("Generate exam failed (%s)", type(err).__name__)
		raise ExamGenerationError() from err
	logger.info("Generated %s exam %s with %d questions", paper_type.value, paper.id, len(paper.questions))
	return paper
