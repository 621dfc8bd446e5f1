import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .settings import settings
from .routers import exams
from .routers import study

logger = logging.getLogger(__name__)

app = FastAPI(title="GCSE Mock Exam API")

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

# Mounted twice: bare paths for service-to-service calls, /api for the web front end
for prefix in ("", "/api"):
	app.include_router(exams.router, prefix=prefix, include_in_schema=not prefix)
	app.include_router(study.router, prefix=prefix, include_in_schema=not prefix)


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}


@app.on_event("startup")
async def startup_event():
	logging.basicConfig(
		level=settings.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	if not settings.gemini_api_key:
		logger.warning("No Gemini API key available. Exam generation will fail.")
