"""Single-shot study helpers: model-answer documents, text analysis, writing feedback, practice sets."""
from __future__ import annotations
import logging
from typing import Any, Dict

from .exceptions import ModelOutputError, StudyToolError
from .generator import TextModel
from .json_extract import parse_json_object
from .models import ExamPaper
from .prompts import (
	build_analyze_text_prompt,
	build_evaluate_writing_prompt,
	build_model_answers_prompt,
	build_practice_set_prompt,
)
from .settings import settings

logger = logging.getLogger(__name__)


async def generate_model_answers(paper: ExamPaper, *, client: TextModel) -> str:
	try:
		prompt = build_model_answers_prompt(paper, settings.model_answers_excerpt_chars)
		text = await client.generate(prompt)
	except Exception as err:
		logger.exception("Model answers failed for paper %s", paper.id)
		raise StudyToolError("Failed to generate model answers") from err
	return text.strip() or "Model answers unavailable."


async def analyze_text(text: str, *, client: TextModel) -> Dict[str, Any]:
	try:
		data = parse_json_object(await client.generate(build_analyze_text_prompt(text), json_output=True))
	except Exception as err:
		logger.exception("Text analysis failed")
		raise StudyToolError("Failed to analyze text") from err
	methods = data.get("methods")
	return {
		"methods": methods if isinstance(methods, list) else [],
		"summary": str(data.get("summary") or ""),
	}


async def evaluate_writing(text: str, target_method: str, *, client: TextModel) -> Dict[str, Any]:
	try:
		prompt = build_evaluate_writing_prompt(text, target_method)
		data = parse_json_object(await client.generate(prompt, json_output=True))
	except Exception as err:
		logger.exception("Writing evaluation failed")
		raise StudyToolError("Failed to evaluate writing") from err
	return {
		"success": bool(data.get("success")),
		"feedback": str(data.get("feedback") or ""),
		"improvementTip": str(data.get("improvementTip") or ""),
	}


async def generate_practice_set(topic: str, difficulty: str, num_questions: int, *, client: TextModel) -> Dict[str, Any]:
	logger.info("Generating practice set: %d questions on %r (%s)", num_questions, topic, difficulty)
	try:
		prompt = build_practice_set_prompt(topic, difficulty, num_questions)
		data = parse_json_object(await client.generate(prompt, json_output=True))
		if not isinstance(data.get("questions"), list):
			raise ModelOutputError("Invalid response format: missing questions array")
	except Exception as err:
		logger.exception("Practice set generation failed")
		raise StudyToolError("Failed to generate practice set") from err
	return {
		"title": data.get("title") or f"Practice Set: {topic}",
		"questions": data["questions"],
	}
