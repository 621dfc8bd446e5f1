"""
Shared fixtures for the exam pipeline tests.
Zero network calls: the text model and image service are replaced by fakes.
"""
import json
from typing import List, Optional

import pytest

from mockexam.models import ExamPaper, StudentAnswer


class FakeTextModel:
	"""Returns canned responses in order and records every prompt."""

	def __init__(self, *responses):
		self.responses = list(responses)
		self.prompts: List[str] = []
		self.json_flags: List[bool] = []

	async def generate(self, prompt: str, *, json_output: bool = False) -> str:
		self.prompts.append(prompt)
		self.json_flags.append(json_output)
		response = self.responses.pop(0)
		if isinstance(response, Exception):
			raise response
		if isinstance(response, (dict, list)):
			return json.dumps(response)
		return response

	async def aclose(self) -> None:
		pass


class FakeImages:
	"""Image source that fails for descriptions containing any of ``fail_on``."""

	def __init__(self, fail_on=()):
		self.fail_on = tuple(fail_on)
		self.descriptions: List[str] = []

	async def generate(self, description: str) -> Optional[str]:
		self.descriptions.append(description)
		if any(token in description for token in self.fail_on):
			return None
		return f"https://images.test/{len(self.descriptions)}"

	async def aclose(self) -> None:
		pass


PAPER_1_MODEL_OUTPUT = {
	"title": "Paper 1: Fiction and Imaginative Writing",
	"description": "19th-century fiction and imaginative writing tasks.",
	"sources": [
		{"id": "A", "title": "The Fog", "author": "A. Writer", "year": 1861, "content": "The fog rolled in. " * 60, "summary": "A foggy night."},
	],
	"questions": [
		{"id": "1", "number": "1", "text": "From the beginning of the extract, identify one thing.", "marks": 1, "aos": ["AO1"], "section": "A", "sourceRef": "Source A (Beginning)", "type": "short"},
		{"id": "2", "number": "2", "text": "Give two examples.", "marks": 2, "aos": ["AO1"], "section": "A", "sourceRef": "Source A", "type": "short"},
		{"id": "3", "number": "3", "text": "Analyse the language.", "marks": 6, "aos": ["AO2"], "section": "A", "sourceRef": "Source A", "type": "long"},
		{"id": "4", "number": "4", "text": "Evaluate the extract.", "marks": 15, "aos": ["AO4"], "section": "A", "sourceRef": "Source A (Whole Text)", "type": "extended"},
		{"id": "5", "number": "5", "text": "Write a story about a journey.", "marks": 40, "aos": ["AO5", "AO6"], "section": "B", "type": "extended", "optionalGroup": "writing_choice", "wordCountTarget": 450},
		{"id": "6", "number": "6", "text": "Look at the images provided.", "marks": 40, "aos": ["AO5", "AO6"], "section": "B", "type": "extended", "optionalGroup": "writing_choice", "wordCountTarget": 450, "imagePromptDescription": "A stormy coastline with a lighthouse", "imagePromptDescription2": "An abandoned cabin in the woods"},
	],
}


def _paper_2_payload():
	return {
		"id": "paper-2",
		"type": "PAPER_2",
		"title": "Paper 2",
		"description": "Non-fiction",
		"timeLimitMinutes": 125,
		"sources": [
			{"id": "A", "title": "Modern", "author": "X", "year": "2010", "content": "A" * 500, "summary": ""},
			{"id": "B", "title": "Victorian", "author": "Y", "year": "1850", "content": "B" * 500, "summary": ""},
		],
		"questions": [
			{"id": "1", "number": "1", "text": "Retrieve from A.", "marks": 2, "aos": ["AO1"], "section": "A", "sourceRef": "Source A", "type": "short"},
			{"id": "3", "number": "3", "text": "Analyse B.", "marks": 15, "aos": ["AO2"], "section": "A", "sourceRef": "Source B", "type": "extended"},
			{"id": "7a", "number": "7a", "text": "Short transactional.", "marks": 6, "aos": ["AO5"], "section": "B", "type": "short"},
			{"id": "8", "number": "8", "text": "Write a letter.", "marks": 40, "aos": ["AO5", "AO6"], "section": "B", "type": "extended", "optionalGroup": "writing_choice"},
			{"id": "9", "number": "9", "text": "Write a speech.", "marks": 40, "aos": ["AO5", "AO6"], "section": "B", "type": "extended", "optionalGroup": "writing_choice"},
		],
	}


@pytest.fixture
def paper_1_output():
	return json.loads(json.dumps(PAPER_1_MODEL_OUTPUT))


@pytest.fixture
def paper_1(paper_1_output):
	payload = {**paper_1_output, "id": "paper-1", "type": "PAPER_1", "timeLimitMinutes": 105}
	payload["questions"][5]["images"] = ["https://images.test/1", "https://images.test/2"]
	return ExamPaper.model_validate(payload)


@pytest.fixture
def paper_2():
	return ExamPaper.model_validate(_paper_2_payload())


@pytest.fixture
def paper_2_answers():
	return {
		"1": StudentAnswer(question_id="1", text="The writer says it was cold."),
		"3": StudentAnswer(question_id="3", text="The writer uses a metaphor."),
		"7a": StudentAnswer(question_id="7a", text="Dear Sir, ..."),
		"8": StudentAnswer(question_id="8", text="Dear Editor, I am writing to..."),
	}


@pytest.fixture
def fake_images():
	return FakeImages()


def marking_output(results, total=None, max_score=64, grade="5"):
	return {
		"totalScore": total if total is not None else sum(r.get("score", 0) for r in results),
		"maxScore": max_score,
		"gradeEstimate": grade,
		"overallFeedback": "Solid attempt.",
		"questionResults": results,
	}


def marked(question_id, score, level=2):
	return {
		"questionId": question_id,
		"score": score,
		"maxScore": 0,
		"level": level,
		"feedback": f"Feedback for {question_id}",
		"aos": {"AO1": score},
		"modelAnswer": f"Model answer {question_id}",
		"comparisonPoints": [{"type": "strength", "text": "Good focus"}],
	}

