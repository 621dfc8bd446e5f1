from __future__ import annotations
import json
from typing import Any, Dict, List, Sequence

from .models import AO, ExamPaper, MarkingRequestItem, NO_ANSWER_SENTINEL, PaperType
from .rubric import max_band_mark, render_marking_grids


ORIGINALITY_NOTICE = (
	"CRITICAL COPYRIGHT NOTICE:\n"
	"You must generate ORIGINAL practice material based on the syllabus topics. DO NOT reproduce real past paper "
	"questions word-for-word. If asked for a specific past paper, refuse and offer a similar simulated question instead."
)

LINE_REFERENCE_BAN = (
	"IMPORTANT: DO NOT refer to specific line numbers or line ranges in any question text or source reference.\n"
	"The source text is generated fresh and has no stable line numbering.\n"
	'Instead, refer to "the extract", "the beginning", "the end", "the first paragraph", "the second half", etc.'
)

_PAPER_1_INSTRUCTIONS = """Paper 1 (1EN0/01):
- Theme: 19th Century Fiction.
- Sources: EXACTLY ONE source (Source A). 650-900 words. 19th-century literature.
- Questions:
  Section A (Reading):
   Q1 (1 mark): Retrieval (from the beginning).
   Q2 (2 marks): Retrieval (from the first half).
   Q3 (6 marks): Language/Structure analysis (specific section described by context).
   Q4 (15 marks): Evaluation (Whole text).
  Section B (Writing):
   Present TWO choices (Question 5 OR Question 6).
   Q5: Narrative/Descriptive text prompt.
   Q6: Narrative/Descriptive prompt linked to IMAGES. (Provide a visual description for each image)."""

_PAPER_2_INSTRUCTIONS = """Paper 2 (1EN0/02):
- Theme: Non-fiction and Transactional.
- Sources: EXACTLY TWO sources. Source A (20th/21st C) and Source B (19th C). Contrasting viewpoints/styles.
- Questions:
  Section A (Reading):
   Q1 (2 marks): Source A retrieval.
   Q2 (2 marks): Source B retrieval.
   Q3 (15 marks): Language/Structure analysis (Source B mostly, or A).
   Q4 (1 mark): Compare explicit.
   Q5 (1 mark): Compare implicit/theme.
   Q6 (15 marks): Evaluation (Source A or B).
  Section B (Writing):
   Q7a (6 marks): Short transactional.
   Q7b (14 marks): Extended transactional.
   Q8 OR Q9 (40 marks): Choice of two extended transactional tasks (Letter, Speech, Article)."""

_PAPER_1_IMAGE_NOTE = """IMPORTANT for Paper 1 Question 6:
You MUST provide TWO distinct image descriptions ("imagePromptDescription" and "imagePromptDescription2").
These two descriptions must be of DIFFERENT SUBJECTS or SCENES related to the theme, not just different angles.
Example: If the theme is "Isolation", one could be "A lonely figure on a bench" and the other "An empty, dusty room"."""


def _q(number: str, text: str, marks: int, aos: List[str], section: str, qtype: str, **extra: Any) -> Dict[str, Any]:
	question: Dict[str, Any] = {
		"id": number, "number": number, "text": text, "marks": marks, "aos": aos, "section": section,
	}
	if "sourceRef" in extra:
		question["sourceRef"] = extra.pop("sourceRef")
	question["type"] = qtype
	question.update(extra)
	return question


_PAPER_1_SKELETON: Dict[str, Any] = {
	"title": "Paper 1: Fiction and Imaginative Writing",
	"description": "19th-century fiction and imaginative writing tasks.",
	"sources": [
		{"id": "A", "title": "Title", "author": "Author", "year": "18XX", "content": "Full text...", "summary": "Short summary"},
	],
	"questions": [
		_q("1", "From the beginning of the extract...", 1, ["AO1"], "A", "short", sourceRef="Source A (Beginning)"),
		_q("2", "...", 2, ["AO1"], "A", "short", sourceRef="Source A"),
		_q("3", "...", 6, ["AO2"], "A", "long", sourceRef="Source A"),
		_q("4", "In this extract, the writer...", 15, ["AO4"], "A", "extended", sourceRef="Source A (Whole Text)"),
		_q("5", "Write a story about...", 40, ["AO5", "AO6"], "B", "extended", optionalGroup="writing_choice", wordCountTarget=450),
		_q(
			"6", "Look at the images provided. Write a description suggested by...", 40, ["AO5", "AO6"], "B", "extended",
			optionalGroup="writing_choice", wordCountTarget=450,
			imagePromptDescription="A stormy coastline with a lighthouse",
			imagePromptDescription2="An abandoned cabin in the woods",
		),
	],
}

_PAPER_2_SKELETON: Dict[str, Any] = {
	"title": "Paper 2: Non-fiction and Transactional Writing",
	"description": "Non-fiction texts and transactional writing.",
	"sources": [
		{"id": "A", "title": "Title", "author": "Author", "year": "20XX", "content": "Full text...", "summary": "Summary"},
		{"id": "B", "title": "Title", "author": "Author", "year": "18XX", "content": "Full text...", "summary": "Summary"},
	],
	"questions": [
		_q("1", "...", 2, ["AO1"], "A", "short", sourceRef="Source A"),
		_q("2", "...", 2, ["AO1"], "A", "short", sourceRef="Source B"),
		_q("3", "...", 15, ["AO2"], "A", "extended", sourceRef="Source B"),
		_q("4", "...", 1, ["AO3"], "A", "short"),
		_q("5", "...", 1, ["AO3"], "A", "short"),
		_q("6", "...", 15, ["AO4"], "A", "extended", sourceRef="Source A"),
		_q("7a", "...", 6, ["AO5"], "B", "short"),
		_q("7b", "...", 14, ["AO5", "AO6"], "B", "long"),
		_q("8", "...", 40, ["AO5", "AO6"], "B", "extended", optionalGroup="writing_choice"),
		_q("9", "...", 40, ["AO5", "AO6"], "B", "extended", optionalGroup="writing_choice"),
	],
}

_PAPERS: Dict[PaperType, Dict[str, Any]] = {
	PaperType.PAPER_1: {"label": "Paper 1", "instructions": _PAPER_1_INSTRUCTIONS, "skeleton": _PAPER_1_SKELETON},
	PaperType.PAPER_2: {"label": "Paper 2", "instructions": _PAPER_2_INSTRUCTIONS, "skeleton": _PAPER_2_SKELETON},
}


def _paper_layout(paper_type: PaperType | str) -> Dict[str, Any]:
	try:
		return _PAPERS[PaperType(paper_type)]
	except (ValueError, KeyError):
		raise ValueError(f"Unknown paper type: {paper_type!r}") from None


def build_generation_prompt(paper_type: PaperType | str) -> str:
	layout = _paper_layout(paper_type)
	sections = [
		f"Generate a JSON response for {layout['label']}.",
		"Strictly follow this JSON schema structure:\n" + json.dumps(layout["skeleton"], indent=2),
		"Task Instructions:\n"
		"You are an expert Pearson Edexcel GCSE English Language (1EN0) examiner and content creator.\n"
		"Create a highly realistic mock exam paper.",
		ORIGINALITY_NOTICE,
		LINE_REFERENCE_BAN,
		layout["instructions"],
	]
	if PaperType(paper_type) is PaperType.PAPER_1:
		sections.append(_PAPER_1_IMAGE_NOTE)
	sections.append(
		"IMPORTANT: Ensure the output is strictly valid JSON. Escape all double quotes and newlines inside strings. "
		"Do not include markdown formatting or comments."
	)
	return "\n\n".join(sections)


_MARKING_OUTPUT_FORMAT = """{
  "totalScore": number,
  "maxScore": number,
  "gradeEstimate": "string (1-9, or 'U' if score is 0 or very low)",
  "overallFeedback": "string",
  "questionResults": [
    {
      "questionId": "matches question number (e.g. 1, 2, 7a)",
      "score": number,
      "maxScore": number,
      "level": number,
      "feedback": "string",
      "aos": { "AO1": number, "AO2": number ... },
      "modelAnswer": "string (REQUIRED: The model response/answer key)",
      "comparisonPoints": [
        { "type": "strength", "text": "string" },
        { "type": "weakness", "text": "string" },
        { "type": "improvement", "text": "string" }
      ]
    }
  ]
}"""


def build_marking_prompt(
	paper_type: PaperType | str,
	source_excerpts: Sequence[str],
	items: Sequence[MarkingRequestItem],
) -> str:
	_paper_layout(paper_type)
	excerpts = list(source_excerpts) or ["Source A content missing"]
	source_lines = [
		f"Source {chr(ord('A') + i)} (excerpt): {excerpt}..."
		for i, excerpt in enumerate(excerpts)
		if excerpt
	]
	answers_json = json.dumps(
		[item.model_dump(by_alias=True, mode="json", exclude={"is_skipped"}) for item in items],
		indent=2,
	)
	return f"""You are a Senior Examiner for Pearson Edexcel GCSE English Language (Specification 1EN0).

{ORIGINALITY_NOTICE}

Task: Mark the student's exam paper against the official level-based mark schemes.

Paper Type: {PaperType(paper_type).value}

{chr(10).join(source_lines)}

Instructions:
1. IGNORE questions that were NOT provided in the input list (skipped optional questions).
2. IF A QUESTION HAS NO ANSWER (studentAnswer is "{NO_ANSWER_SENTINEL}"):
   - Assign **0 marks**.
   - Provide a helpful "improvement" comparison point explaining what was missing and what they should have interpreted/analyzed.
   - STILL GENERATE A FULL MODEL ANSWER.
3. For each answered question, determine the Level (1-4 or 1-5) and the raw Mark.
4. GENERATE A MODEL ANSWER (REQUIRED FOR ALL QUESTIONS):
   - For Retrieval/Short Questions: Provide the exact quote, fact, or phrase that earns the mark.
   - For Analysis/Evaluation/Writing: Write a full "Top Band" paragraph or example response.
   - For Image Questions (e.g. Q6): Write a model answer that SPECIFICALLY describes the SELECTED prompt as indicated in the [CONTEXT]. If no selection was recorded, pick the most relevant one. Do not use labels like "Prompt 1:" - start the response immediately.
   - You MUST provide a content-rich model answer for EVERY provided question.
5. COMPARE: Provide specific comparison points (strength, weakness, improvement) between the student's answer and the model.

Edexcel Marking Criteria:
{render_marking_grids()}
IMPORTANT MARKING RULES:
- Use the grids above to decide the Level first, then fine-tune the Mark within the Level.
- AO1 and AO3 questions are marked by counting creditable points, not by level.
- "Perceptive" = Level 4. "Clear" = Level 3. "Some" = Level 2. "Limited" = Level 1.
- For 15-mark questions (AO4): Level 4 is 12-15 marks. Level 3 is 8-11 marks.
- For 40-mark writing (AO5+AO6): Scale the AO5 ({max_band_mark(AO.AO5)} marks) and AO6 ({max_band_mark(AO.AO6)} marks) separately using the Level 1-5 grids.

Student Answers:
{answers_json}

Output JSON format:
{_MARKING_OUTPUT_FORMAT}
"""


def build_model_answers_prompt(paper: ExamPaper, excerpt_chars: int = 1000) -> str:
	source_a = paper.sources[0].content if paper.sources else ""
	source_b = paper.sources[1].content if len(paper.sources) > 1 else ""
	source_b_section = f"Source B:\n{source_b[:excerpt_chars]}..." if source_b else ""
	questions = "\n\n".join(f"Question {q.number}: {q.text}" for q in paper.questions)
	return f"""Create a detailed Mark Scheme and Model Answer document for this GCSE English Language Exam Paper ({paper.title}).

Generate ORIGINAL model answers based on the exam questions provided. These are simulated practice materials, not reproductions of official mark schemes.

Source A:
{source_a[:excerpt_chars]}...
{source_b_section}

Questions:
{questions}

Output Requirements:
- Format as valid Markdown.
- Include "Examiner's Report" style commentary.
- For the optional writing questions, provide a model for BOTH options.
"""


def build_analyze_text_prompt(text: str) -> str:
	return (
		"Analyze the following text for language methods and structural features used by the writer.\n"
		"Focus on techniques relevant to GCSE English Language (e.g., metaphor, simile, personification, alliteration, "
		"pathetic fallacy, sentence structure, etc.).\n"
		"Note: This is a student study tool. Provide educational analysis only.\n\n"
		f'Text: "{text}"\n\n'
		"Return ONLY a JSON object with keys: methods (array of objects with name, quote, effect), "
		"summary (brief summary of the writer's style)."
	)


def build_evaluate_writing_prompt(text: str, target_method: str) -> str:
	return (
		f'Evaluate the following student writing. The student was asked to use the language method: "{target_method}".\n'
		"Note: This is for educational feedback purposes only.\n\n"
		f'Student Writing: "{text}"\n\n'
		"Return ONLY a JSON object with keys: success (boolean), "
		f"feedback (specific feedback on how well they used {target_method}), improvementTip (one tip to improve)."
	)


def build_practice_set_prompt(topic: str, difficulty: str, num_questions: int) -> str:
	return f"""You are an expert GCSE English Language examiner creating a practice assignment.

{ORIGINALITY_NOTICE}

Task: Create {num_questions} GCSE English Language practice questions on the topic: "{topic}"
Difficulty Level: {difficulty}

Guidelines:
- Questions should be appropriate for GCSE English Language students
- Include a mix of question types (retrieval, analysis, evaluation, writing)
- Each question should have clear mark allocations
- For analysis/evaluation questions, specify which AO (Assessment Objective) is being tested
- Questions should be challenging but fair for the {difficulty} level

Difficulty Guidelines:
- Easy: Focus on retrieval, basic comprehension, simple analysis
- Medium: Mix of retrieval, analysis, some evaluation
- Hard: Complex analysis, critical evaluation, sophisticated writing tasks
- Mixed: Variety of difficulty levels

Output JSON format:
{{
  "title": "Practice Set: [Topic]",
  "questions": [
    {{
      "number": "1",
      "text": "Question text here",
      "marks": number,
      "aos": ["AO1", "AO2", etc.],
      "type": "short" | "long" | "extended",
      "guidance": "Brief guidance for students (optional)"
    }}
  ]
}}

IMPORTANT: Ensure output is strictly valid JSON. No markdown formatting.
"""
