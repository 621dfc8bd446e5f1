from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_image_client, get_text_model
from ..exceptions import ExamServiceError
from ..generator import ImageSource, TextModel, generate_exam
from ..marking import mark_exam
from ..models import ExamPaper, ExamResult, GenerateExamRequest, MarkExamRequest, ModelAnswersRequest
from ..study import generate_model_answers

router = APIRouter(tags=["exams"])


@router.post("/generate-exam", response_model=ExamPaper, response_model_by_alias=True, response_model_exclude_none=True)
async def generate_exam_route(
	req: GenerateExamRequest,
	client: TextModel = Depends(get_text_model),
	images: ImageSource = Depends(get_image_client),
):
	try:
		return await generate_exam(req.type, client=client, images=images)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.post("/mark-exam", response_model=ExamResult, response_model_by_alias=True)
async def mark_exam_route(req: MarkExamRequest, client: TextModel = Depends(get_text_model)):
	try:
		return await mark_exam(req.paper, req.answers, client=client)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.post("/model-answers")
async def model_answers_route(req: ModelAnswersRequest, client: TextModel = Depends(get_text_model)):
	try:
		text = await generate_model_answers(req.paper, client=client)
	except ExamServiceError as e:
		raise HTTPException(status_code=500, detail=str(e))
	return {"text": text}
