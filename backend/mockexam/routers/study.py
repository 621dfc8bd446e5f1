from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_text_model
from ..exceptions import ExamServiceError
from ..generator import TextModel
from ..models import AnalyzeTextRequest, EvaluateWritingRequest, PracticeSetRequest
from ..study import analyze_text, evaluate_writing, generate_practice_set

router = APIRouter(tags=["study"])


@router.post("/analyze-text")
async def analyze_text_route(req: AnalyzeTextRequest, client: TextModel = Depends(get_text_model)):
	text = (req.text or "").strip()
	if not text:
		raise HTTPException(status_code=400, detail="text is required")
	try:
		return await analyze_text(text, client=client)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.post("/evaluate-writing")
async def evaluate_writing_route(req: EvaluateWritingRequest, client: TextModel = Depends(get_text_model)):
	text = (req.text or "").strip()
	if not text:
		raise HTTPException(status_code=400, detail="text is required")
	try:
		return await evaluate_writing(text, req.target_method, client=client)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.post("/generate-practice-set")
async def practice_set_route(req: PracticeSetRequest, client: TextModel = Depends(get_text_model)):
	try:
		return await generate_practice_set(req.topic, req.difficulty, req.num_questions, client=client)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))
