from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .models import ExamPaper, ExamResult, MarkingResponse, QuestionResult

logger = logging.getLogger(__name__)


def assemble_result(
	response: MarkingResponse,
	question_results: List[QuestionResult],
	paper: ExamPaper,
	*,
	now: Optional[datetime] = None,
) -> ExamResult:
	"""Merge the model's headline figures with the reconciled per-question results.

	The model's ``totalScore`` is kept as reported; a mismatch with the
	per-question sum is only logged.
	"""
	question_sum = sum(r.score for r in question_results)
	if question_sum != response.total_score:
		logger.warning(
			"Reported totalScore %s differs from per-question sum %s for paper %s",
			response.total_score, question_sum, paper.id,
		)
	return ExamResult(
		total_score=response.total_score,
		max_score=response.max_score,
		grade_estimate=response.grade_estimate,
		overall_feedback=response.overall_feedback,
		question_results=question_results,
		date=(now or datetime.now(timezone.utc)).isoformat(),
		paper_type=paper.paper_type,
	)
