from __future__ import annotations
from typing import List, Mapping, Optional

from .models import ExamPaper, MarkingRequestItem, NO_ANSWER_SENTINEL, Question, StudentAnswer


def has_answer(answer: Optional[StudentAnswer]) -> bool:
	return answer is not None and answer.has_text


def is_skipped(question: Question, answer: Optional[StudentAnswer]) -> bool:
	"""True for an unanswered member of an either/or group; its sibling carries the marks."""
	return bool(question.optional_group) and not has_answer(answer) and not question.has_images


def _image_context(question: Question, answer: Optional[StudentAnswer]) -> str:
	desc1 = question.image_prompt_description or ""
	desc2 = question.image_prompt_description2 or ""
	selected = answer.selected_image_index if answer is not None else None
	if selected is not None:
		chosen = desc1 if selected == 0 else desc2
		return (
			f"[CONTEXT: This question provided two images. The student SELECTED Prompt {selected + 1}. "
			f"Selected prompt description: {chosen}.]"
		)
	return (
		f"[CONTEXT: This question provided two images. Prompt 1 description: {desc1}. "
		f"Prompt 2 description: {desc2}. Note: No specific image selection was recorded.]"
	)


def build_marking_item(question: Question, answer: Optional[StudentAnswer]) -> MarkingRequestItem:
	question_text = question.text
	if question.has_images:
		question_text += "\n\n" + _image_context(question, answer)
	return MarkingRequestItem(
		question_id=question.id,
		question_number=question.number,
		question_text=question_text,
		max_marks=question.marks,
		aos=list(question.aos),
		source_ref=question.source_ref,
		student_answer=answer.text if has_answer(answer) else NO_ANSWER_SENTINEL,
		selected_image_index=answer.selected_image_index if answer is not None else None,
		is_skipped=is_skipped(question, answer),
	)


def build_marking_items(paper: ExamPaper, answers: Mapping[str, StudentAnswer]) -> List[MarkingRequestItem]:
	"""Flatten the paper into marking items, in paper order, dropping skipped optional questions."""
	items = (build_marking_item(q, answers.get(q.id)) for q in paper.questions)
	return [item for item in items if not item.is_skipped]
