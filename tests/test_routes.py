"""
Test: FastAPI routes and the serverless dispatcher share behaviour and error mapping.
"""
import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeImages, FakeTextModel, marked, marking_output
from mockexam.dependencies import get_image_client, get_text_model
from mockexam import handlers
from mockexam.handlers import dispatch
from mockexam.main import app


@pytest.fixture
def client_factory():
	def make(text_model, images=None):
		app.dependency_overrides[get_text_model] = lambda: text_model
		app.dependency_overrides[get_image_client] = lambda: images or FakeImages()
		return TestClient(app)

	yield make
	app.dependency_overrides.clear()


def _paper_json(paper):
	return paper.model_dump(by_alias=True, mode="json", exclude_none=True)


class TestGenerateExamRoute:
	def test_returns_paper(self, client_factory, paper_1_output):
		http = client_factory(FakeTextModel(paper_1_output))
		r = http.post("/generate-exam", json={"type": "PAPER_1"})
		assert r.status_code == 200
		data = r.json()
		assert data["type"] == "PAPER_1"
		assert data["timeLimitMinutes"] == 105
		assert data["questions"][5]["images"] == ["https://images.test/1", "https://images.test/2"]
		assert data["questions"][5]["optionalGroup"] == "writing_choice"
		assert "sourceRef" not in data["questions"][4]
		assert data["sources"][0]["year"] == "1861"

	def test_api_prefix_and_legacy_paper_type(self, client_factory):
		http = client_factory(FakeTextModel({"title": "P2"}))
		r = http.post("/api/generate-exam", json={"paperType": "paper2"})
		assert r.status_code == 200
		assert r.json()["timeLimitMinutes"] == 125

	def test_generic_failure(self, client_factory):
		http = client_factory(FakeTextModel('{"title": oops}'))
		r = http.post("/generate-exam", json={"type": "PAPER_2"})
		assert r.status_code == 500
		assert r.json() == {"detail": "Failed to generate exam"}

	def test_invalid_type_is_request_error(self, client_factory):
		http = client_factory(FakeTextModel())
		assert http.post("/generate-exam", json={"type": "PAPER_3"}).status_code == 422


class TestMarkExamRoute:
	def test_returns_result(self, client_factory, paper_2):
		output = marking_output([marked("1", 1), marked("8", 20)], total=21)
		http = client_factory(FakeTextModel(output))
		body = {
			"paper": _paper_json(paper_2),
			"answers": {
				"1": {"questionId": "1", "text": "cold", "timestamp": 1700000000, "isFlagged": False},
				"8": {"questionId": "8", "text": "Dear Editor"},
			},
		}
		r = http.post("/mark-exam", json=body)
		assert r.status_code == 200
		data = r.json()
		assert data["totalScore"] == 21
		assert data["paperType"] == "PAPER_2"
		ids = [q["questionId"] for q in data["questionResults"]]
		assert ids == ["1", "3", "7a", "8"]
		assert data["questionResults"][1]["modelAnswer"] == "N/A"
		assert data["questionResults"][0]["comparisonPoints"] == [{"type": "strength", "text": "Good focus"}]

	def test_generic_failure(self, client_factory, paper_2):
		http = client_factory(FakeTextModel(TimeoutError()))
		r = http.post("/mark-exam", json={"paper": _paper_json(paper_2), "answers": {}})
		assert r.status_code == 500
		assert r.json() == {"detail": "Failed to mark exam"}


def test_missing_api_key(monkeypatch):
	from mockexam import gemini_client

	monkeypatch.setattr(gemini_client.settings, "gemini_api_key", None)
	app.dependency_overrides[get_image_client] = lambda: FakeImages()
	try:
		r = TestClient(app).post("/generate-exam", json={"type": "PAPER_1"})
	finally:
		app.dependency_overrides.clear()
	assert r.status_code == 500
	assert r.json() == {"detail": "Server misconfiguration: API key missing."}


def test_info():
	r = TestClient(app).get("/info")
	assert r.status_code == 200
	assert r.json()["status"] == "ok"


class TestDispatch:
	def test_generate_exam(self, paper_1_output):
		status, payload = asyncio.run(
			dispatch("/api/generate-exam", {"type": "PAPER_1"}, client=FakeTextModel(paper_1_output), images=FakeImages())
		)
		assert status == 200
		assert payload["type"] == "PAPER_1"
		assert len(payload["questions"][5]["images"]) == 2

	def test_mark_exam(self, paper_2):
		output = marking_output([marked("1", 2)])
		status, payload = asyncio.run(
			dispatch("/mark-exam", {"paper": _paper_json(paper_2), "answers": {}}, client=FakeTextModel(output), images=FakeImages())
		)
		assert status == 200
		assert payload["questionResults"][0]["score"] == 2

	def test_generic_failure(self):
		status, payload = asyncio.run(
			dispatch("/generate-exam", {"type": "PAPER_1"}, client=FakeTextModel(RuntimeError("down")), images=FakeImages())
		)
		assert (status, payload) == (500, {"detail": "Failed to generate exam"})

	def test_bad_body(self):
		status, _ = asyncio.run(dispatch("/mark-exam", {"paper": {}}, client=FakeTextModel(), images=FakeImages()))
		assert status == 422

	def test_unknown_path(self):
		status, payload = asyncio.run(dispatch("/api/nope", {}, client=FakeTextModel(), images=FakeImages()))
		assert status == 404
		assert payload == {"detail": "API endpoint not found"}


class TestHandleEvent:
	def test_json_string_body(self, monkeypatch, paper_1_output):
		monkeypatch.setattr(handlers, "GeminiClient", lambda: FakeTextModel(paper_1_output))
		monkeypatch.setattr(handlers, "ImageClient", lambda: FakeImages())
		response = handlers.handle({"rawPath": "/api/generate-exam", "body": json.dumps({"type": "PAPER_1"})})
		assert response["statusCode"] == 200
		assert response["headers"] == {"Content-Type": "application/json"}
		assert json.loads(response["body"])["timeLimitMinutes"] == 105

	def test_invalid_json_body(self):
		response = handlers.handle({"path": "/mark-exam", "body": "{not json"})
		assert response["statusCode"] == 400
		assert json.loads(response["body"]) == {"detail": "Invalid JSON body"}

	def test_unknown_path(self):
		response = handlers.handle({"path": "/api/unknown", "body": None})
		assert response["statusCode"] == 404

	def test_missing_key(self, monkeypatch):
		from mockexam import gemini_client

		monkeypatch.setattr(gemini_client.settings, "gemini_api_key", None)
		response = handlers.handle({"path": "/analyze-text", "body": {"text": "Dark."}})
		assert response["statusCode"] == 500
		assert json.loads(response["body"]) == {"detail": "Server misconfiguration: API key missing."}
