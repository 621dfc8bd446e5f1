"""Edexcel GCSE English Language (1EN0) level descriptors for AO1-AO6.

Band boundaries are fixed constants shared with the grading model through the
marking prompt. They are looked up, never derived.
"""
from __future__ import annotations
from typing import Dict, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict

from .models import AO


RUBRIC_VERSION = "1EN0-2024.1"


class RubricBand(BaseModel):
	model_config = ConfigDict(frozen=True)

	assessment_objective: AO
	band_level: int
	mark_range_low: int
	mark_range_high: int
	descriptor: str


class RubricObjective(BaseModel):
	model_config = ConfigDict(frozen=True)

	ao: AO
	heading: str
	# "points": one mark per creditable point; "bands": level-based
	marking: Literal["points", "bands"]
	guidance: Tuple[str, ...] = ()
	bands: Tuple[RubricBand, ...] = ()


def _bands(ao: AO, rows: List[Tuple[int, int, str]]) -> Tuple[RubricBand, ...]:
	return tuple(
		RubricBand(assessment_objective=ao, band_level=i, mark_range_low=low, mark_range_high=high, descriptor=text)
		for i, (low, high, text) in enumerate(rows, start=1)
	)


RUBRIC: Dict[AO, RubricObjective] = {
	AO.AO1: RubricObjective(
		ao=AO.AO1,
		heading="AO1 (Reading) - Retrieval & Interpretation (Levels 1-2 typically for Q1/Q2)",
		marking="points",
		guidance=("Mark based on accuracy: 1 mark for each correct point/quote.",),
	),
	AO.AO2: RubricObjective(
		ao=AO.AO2,
		heading="AO2 (Reading) - Language & Structure (Level 1-4 for Q3/Q6-P2)",
		marking="bands",
		bands=_bands(AO.AO2, [
			(1, 3, "Limited comment on language/structure; simple assertion."),
			(4, 6, "Some comment on writer's methods; relevant textual reference."),
			(7, 9, "Clear/relevant explanation of effects; accurate terminology."),
			(10, 12, "Perceptive analysis of language/structure; discerning references."),
		]),
	),
	AO.AO3: RubricObjective(
		ao=AO.AO3,
		heading="AO3 (Reading) - Comparison (Q4/Q5-P2)",
		marking="points",
		guidance=(
			"Mark based on accuracy: 1 mark for each valid comparison point.",
			"Description of ideas only is not a comparison.",
			"Credit clear links, similarities and differences between the writers' ideas and perspectives.",
		),
	),
	AO.AO4: RubricObjective(
		ao=AO.AO4,
		heading="AO4 (Reading) - Evaluation (Level 1-4 for Q4/Q6-P2)",
		marking="bands",
		bands=_bands(AO.AO4, [
			(1, 3, "Description of content; uncritical; limited support."),
			(4, 7, "Comment on the statement; some visual/textual support."),
			(8, 11, "Clear evaluation; convincing response; focused references."),
			(12, 15, "Perceptive/critical evaluation; detailed/discriminating support."),
		]),
	),
	AO.AO5: RubricObjective(
		ao=AO.AO5,
		heading="AO5 (Writing) - Content & Organization (Level 1-5)",
		marking="bands",
		bands=_bands(AO.AO5, [
			(1, 4, "Basic expression; repetitive; little awareness of audience."),
			(5, 8, "Clear expression; acceptable structure; some control."),
			(9, 12, "Effective tone; clear organization; cohesive."),
			(13, 16, "Compelling, manipulating audience; sophisticated structure."),
			(17, 24, "Subtle/sophisticated; fully realised; effortless cohesion."),
		]),
	),
	AO.AO6: RubricObjective(
		ao=AO.AO6,
		heading="AO6 (Writing) - Technical Accuracy (Level 1-5)",
		marking="bands",
		bands=_bands(AO.AO6, [
			(1, 3, "Frequent errors; hinders meaning."),
			(4, 6, "Some accurate punctuation/spelling; meaning clear."),
			(7, 9, "Generally accurate; varied vocabulary; good control."),
			(10, 12, "High level of accuracy; ambitious vocabulary."),
			(13, 16, "Strategic/extensive vocabulary; precision; virtually error-free."),
		]),
	),
}


def max_band_mark(ao: AO) -> int:
	bands = RUBRIC[ao].bands
	return bands[-1].mark_range_high if bands else 0


def check_band_ranges(objective: RubricObjective) -> None:
	"""Raise ValueError unless the bands are contiguous and ascend with level."""
	expected_low = 1
	for level, band in enumerate(objective.bands, start=1):
		if band.band_level != level:
			raise ValueError(f"{objective.ao.value}: band {band.band_level} out of order")
		if band.mark_range_low != expected_low or band.mark_range_high < band.mark_range_low:
			raise ValueError(f"{objective.ao.value}: level {level} range {band.mark_range_low}-{band.mark_range_high} is not contiguous")
		expected_low = band.mark_range_high + 1


def render_marking_grids() -> str:
	lines = [
		f"MARKING GRIDS (version {RUBRIC_VERSION})",
		"NO MARKING SHOULD BE DONE WITHOUT REFERENCE TO THESE GRIDS.",
		"",
	]
	for objective in RUBRIC.values():
		lines.append(objective.heading)
		for note in objective.guidance:
			lines.append(f"- {note}")
		for band in objective.bands:
			lines.append(f"- Level {band.band_level} ({band.mark_range_low}-{band.mark_range_high} marks): {band.descriptor}")
		lines.append("")
	return "\n".join(lines).rstrip() + "\n"
