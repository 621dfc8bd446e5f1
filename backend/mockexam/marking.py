from __future__ import annotations
import logging
from typing import List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from .exceptions import MarkingError, ModelOutputError
from .generator import TextModel
from .json_extract import parse_json_object
from .models import (
	ExamPaper,
	ExamResult,
	MarkedQuestion,
	MarkingResponse,
	Question,
	QuestionResult,
	StudentAnswer,
)
from .prompts import build_marking_prompt
from .reconciler import build_marking_items, is_skipped
from .results import assemble_result
from .settings import settings

logger = logging.getLogger(__name__)

FALLBACK_FEEDBACK = "AI marking unavailable for this question."

_MARKED_QUESTION = TypeAdapter(MarkedQuestion)


def source_excerpts(paper: ExamPaper, limit: Optional[int] = None) -> List[str]:
	limit = settings.source_excerpt_chars if limit is None else limit
	return [(source.content or "")[:limit] for source in paper.sources]


def decode_marking_response(data: dict) -> MarkingResponse:
	"""Validate the headline figures strictly and each question entry on its own.

	An entry that cannot be decoded is logged and discarded, so its question
	falls back like an omitted one instead of failing the whole attempt.
	"""
	entries = data.get("questionResults")
	if not isinstance(entries, list):
		entries = []
	try:
		response = MarkingResponse.model_validate({**data, "questionResults": []})
	except ValidationError as err:
		raise ModelOutputError(f"Marking response does not match the schema: {err}") from err
	for index, entry in enumerate(entries):
		try:
			response.question_results.append(_MARKED_QUESTION.validate_python(entry))
		except ValidationError as err:
			logger.warning("Discarding questionResults[%d] from the grading model: %s", index, err)
	return response


def find_marked(question: Question, marked: List[MarkedQuestion]) -> Optional[MarkedQuestion]:
	# The model may echo either the id or the printed number, in any order
	for entry in marked:
		if entry.question_id in (question.id, question.number):
			return entry
	return None


def _clamp(score: int, question: Question) -> int:
	clamped = max(0, min(score, question.marks))
	if clamped != score:
		logger.warning("Question %s: score %s clamped to %s (max %s)", question.number, score, clamped, question.marks)
	return clamped


def reconcile_results(
	paper: ExamPaper,
	answers: Mapping[str, StudentAnswer],
	marked: List[MarkedQuestion],
) -> List[QuestionResult]:
	results: List[QuestionResult] = []
	for question in paper.questions:
		answer = answers.get(question.id)
		if is_skipped(question, answer):
			continue
		student_text = answer.text if answer is not None else ""
		entry = find_marked(question, marked)
		if entry is None:
			logger.warning("No marking returned for question %s; using fallback result", question.number)
			results.append(QuestionResult(
				question_id=question.id,
				score=0,
				max_score=question.marks,
				level=0,
				feedback=FALLBACK_FEEDBACK,
				aos={},
				model_answer="N/A",
				student_answer=student_text,
				comparison_points=[],
			))
			continue
		results.append(QuestionResult(
			question_id=question.id,
			score=_clamp(entry.score, question),
			max_score=question.marks,
			level=entry.level,
			feedback=entry.feedback,
			aos=dict(entry.aos),
			model_answer=entry.model_answer,
			student_answer=student_text,
			comparison_points=list(entry.comparison_points),
		))
	return results


async def mark_exam(
	paper: ExamPaper,
	answers: Mapping[str, StudentAnswer],
	*,
	client: TextModel,
) -> ExamResult:
	logger.info("Marking exam %s (%s)", paper.id, paper.paper_type.value)
	try:
		items = build_marking_items(paper, answers)
		prompt = build_marking_prompt(paper.paper_type, source_excerpts(paper), items)
		raw = await client.generate(prompt, json_output=True)
		response = decode_marking_response(parse_json_object(raw))
		question_results = reconcile_results(paper, answers, response.question_results)
		result = assemble_result(response, question_results, paper)
	except Exception as err:
		logger.exception("Mark exam failed (%s)", type(err).__name__)
		raise MarkingError() from err
	logger.info("Marked exam %s: %s/%s", paper.id, result.total_score, result.max_score)
	return result
