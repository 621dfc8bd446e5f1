from __future__ import annotations
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, get_args

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


NO_ANSWER_SENTINEL = "(NO ANSWER PROVIDED)"


class PaperType(str, Enum):
	PAPER_1 = "PAPER_1"
	PAPER_2 = "PAPER_2"

	@classmethod
	def _missing_(cls, value: object) -> Optional["PaperType"]:
		# Older front-end builds send "paper1" / "paper2"
		if isinstance(value, str):
			legacy = {"paper1": cls.PAPER_1, "paper2": cls.PAPER_2}
			return legacy.get(value.strip().lower())
		return None


class AO(str, Enum):
	AO1 = "AO1"
	AO2 = "AO2"
	AO3 = "AO3"
	AO4 = "AO4"
	AO5 = "AO5"
	AO6 = "AO6"


class WireModel(BaseModel):
	"""Base for records exchanged with the front end and the model (camelCase on the wire)."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_text(value: Any) -> Any:
	# The model sometimes emits numbers where the schema asks for strings ("year": 1854, "number": 3)
	if isinstance(value, (int, float)) and not isinstance(value, bool):
		return str(value)
	return value


def _as_int(value: Any) -> Any:
	if isinstance(value, float):
		return int(round(value))
	if isinstance(value, str):
		try:
			return int(round(float(value)))
		except ValueError:
			return value
	return value


# Lenient scalars for fields the model fills in
Text = Annotated[str, BeforeValidator(_as_text)]
WholeNumber = Annotated[int, BeforeValidator(_as_int)]


def _lower(value: Any) -> Any:
	return value.strip().lower() if isinstance(value, str) else value


def _none_as_empty(value: Any) -> Any:
	return "" if value is None else value


def _none_as_zero(value: Any) -> Any:
	return 0 if value is None else value


# Strings the model may leave null (anonymous extracts, missing summaries)
Blank = Annotated[str, BeforeValidator(_none_as_empty)]


class Source(WireModel):
	id: Text
	title: Blank = ""
	author: Blank = ""
	year: Annotated[Text, BeforeValidator(_none_as_empty)] = ""
	content: Blank = ""
	summary: Blank = ""


class Question(WireModel):
	id: Text
	number: Text
	text: str
	marks: int = Field(gt=0)
	aos: List[AO] = Field(
		default_factory=list,
		validation_alias=AliasChoices("aos", "assessmentObjectives"),
		serialization_alias="aos",
	)
	section: Literal["A", "B"]
	source_ref: Optional[str] = None
	type: Literal["short", "long", "extended"]
	optional_group: Optional[str] = None
	word_count_target: Optional[int] = None
	images: Optional[List[str]] = None
	image_prompt_description: Optional[str] = None
	image_prompt_description2: Optional[str] = None

	@property
	def has_images(self) -> bool:
		return bool(self.images)


class ExamPaper(WireModel):
	id: str
	paper_type: PaperType = Field(
		validation_alias=AliasChoices("type", "paperType"),
		serialization_alias="type",
	)
	title: Blank = ""
	description: Blank = ""
	time_limit_minutes: int
	sources: List[Source] = Field(default_factory=list)
	questions: List[Question] = Field(default_factory=list)


class StudentAnswer(WireModel):
	question_id: str = ""
	text: Blank = ""
	selected_image_index: Optional[int] = None
	timestamp: Optional[int] = None
	is_flagged: bool = False

	@property
	def has_text(self) -> bool:
		return bool(self.text.strip())


class MarkingRequestItem(WireModel):
	question_id: str
	question_number: str
	question_text: str
	max_marks: int
	aos: List[AO] = Field(default_factory=list)
	source_ref: Optional[str] = None
	student_answer: str
	selected_image_index: Optional[int] = None
	is_skipped: bool = False


ComparisonKind = Literal["strength", "weakness", "improvement", "missing"]
COMPARISON_KINDS = get_args(ComparisonKind)


class ComparisonPoint(WireModel):
	type: Annotated[ComparisonKind, BeforeValidator(_lower)]
	text: Blank = ""


class QuestionResult(WireModel):
	question_id: str
	score: int
	max_score: int
	level: int
	feedback: str
	aos: Dict[str, int] = Field(default_factory=dict)
	model_answer: str
	student_answer: str = ""
	comparison_points: List[ComparisonPoint] = Field(default_factory=list)


class ExamResult(WireModel):
	total_score: int | float
	max_score: int | float
	grade_estimate: str
	overall_feedback: str
	question_results: List[QuestionResult]
	date: str
	paper_type: PaperType


# ---- Grading model output ----

class MarkedQuestion(WireModel):
	"""One entry of the grading model's ``questionResults``; only id and score are required."""

	question_id: Text
	score: WholeNumber
	max_score: Optional[WholeNumber] = None
	level: Annotated[WholeNumber, BeforeValidator(_none_as_zero)] = 0
	feedback: Blank = ""
	aos: Dict[str, int] = Field(default_factory=dict)
	model_answer: Blank = ""
	comparison_points: List[ComparisonPoint] = Field(default_factory=list)

	@field_validator("aos", mode="before")
	@classmethod
	def _round_ao_marks(cls, value: Any) -> Any:
		if not isinstance(value, dict):
			return {}
		marks = {str(k): _as_int(v) for k, v in value.items()}
		return {k: v for k, v in marks.items() if isinstance(v, int) and not isinstance(v, bool)}

	@field_validator("comparison_points", mode="before")
	@classmethod
	def _known_points_only(cls, value: Any) -> Any:
		# Kinds outside the four the results view understands are dropped, not rejected
		if not isinstance(value, list):
			return []
		return [
			point for point in value
			if isinstance(point, dict) and _lower(point.get("type")) in COMPARISON_KINDS
		]


class MarkingResponse(WireModel):
	total_score: int | float
	max_score: int | float
	grade_estimate: Text
	overall_feedback: Blank = ""
	# Entries are decoded one at a time by the marking engine
	question_results: List[MarkedQuestion] = Field(default_factory=list)


# ---- Request bodies ----

class GenerateExamRequest(WireModel):
	type: PaperType = Field(validation_alias=AliasChoices("type", "paperType"))


class MarkExamRequest(WireModel):
	paper: ExamPaper
	answers: Dict[str, StudentAnswer] = Field(default_factory=dict)


class ModelAnswersRequest(WireModel):
	paper: ExamPaper


class AnalyzeTextRequest(WireModel):
	text: str


class EvaluateWritingRequest(WireModel):
	text: str
	target_method: str


class PracticeSetRequest(WireModel):
	topic: str
	difficulty: Literal["Easy", "Medium", "Hard", "Mixed"] = "Mixed"
	num_questions: int = Field(default=5, ge=1, le=20)
