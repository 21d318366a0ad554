from fastapi import FastAPI, Header, HTTPException, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from config import Config
from models import ClassifyRequest, ClassificationResponse, ErrorResponse, ReasonDetail, SampleMessages
from reasons import describe_result, format_reason
from rules import DEFAULT_RULES, load_rules
from samples import SAMPLE_MESSAGES, random_sample
from spam_detector import SpamDetector, InputTooLarge
import logging
import uvicorn
import datetime

# Setup Logger
logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("spam-checker-api")

app = FastAPI(title="Spam Checker API")

# The checker page calls us straight from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()}
    )

@app.exception_handler(InputTooLarge)
async def input_too_large_handler(request: Request, exc: InputTooLarge):
    return JSONResponse(
        status_code=413,
        content=ErrorResponse(detail=str(exc)).model_dump()
    )

# Initialize detector (a bad rules file stops startup here)
rules = load_rules(Config.RULES_FILE) if Config.RULES_FILE else DEFAULT_RULES
detector = SpamDetector(rules=rules, max_input_length=Config.MAX_INPUT_LENGTH)

async def verify_api_key(x_api_key: str = Header(None)):
    if x_api_key and x_api_key != Config.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API Key")
    return x_api_key

@app.post("/api/classify", response_model=ClassificationResponse)
def classify_endpoint(request: ClassifyRequest, api_key: str = Depends(verify_api_key)):
    result = detector.classify(request.message)

    logger.info(
        f"Classified message: spam={result.is_spam} confidence={result.confidence}% "
        f"score={result.score}"
    )

    return ClassificationResponse(
        isSpam=result.is_spam,
        confidence=result.confidence,
        score=result.score,
        verdict="spam" if result.is_spam else "safe",
        reasons=result.reason_texts(),
        reasonDetails=[
            ReasonDetail(kind=r.kind, text=format_reason(r), params=dict(r.params))
            for r in result.reasons
        ],
        summary=describe_result(result),
    )

@app.get("/api/classify")
async def classify_info():
    """Simple GET endpoint so the page can check the API is up."""
    return {
        "status": "success",
        "message": "Spam Checker API reachable. POST a message to classify it."
    }

@app.get("/api/rules")
async def rules_endpoint(api_key: str = Depends(verify_api_key)):
    return detector.rules.to_dict()

@app.get("/api/samples", response_model=SampleMessages)
async def samples_endpoint():
    return SampleMessages(**SAMPLE_MESSAGES)

@app.get("/api/samples/random")
async def random_sample_endpoint():
    return {"status": "success", "message": random_sample()}

@app.get("/health")
def health_check():
    return {
        "status": "running",
        "service": "Spam Checker",
        "timestamp": datetime.datetime.now().isoformat()
    }

if __name__ == "__main__":
    uvicorn.run("main:app", host=Config.HOST, port=Config.PORT, reload=True)
