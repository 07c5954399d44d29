import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .settings import settings
from .schemas import DECISIONS, SendEmailIn, SendEmailOut
from .templates import render_decision_email
from .mailer import MailerError, send_mail

logger = logging.getLogger(__name__)

app = FastAPI(title="Portal Notification Service", version="1.0.0")

def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)

@app.on_event("startup")
def _startup():
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    if not settings.mail_configured:
        logger.warning("Mailjet credentials not configured; /api/send-email will answer 500")

@app.get("/healthz")
def healthz():
    return {"status": "ok"}

@app.post("/api/send-email", response_model=SendEmailOut)
async def send_email(request: Request):
    try:
        body = SendEmailIn.model_validate(await request.json())
    except (ValueError, ValidationError):
        return _error("Missing required fields", 400)
    if body.missing_fields():
        return _error("Missing required fields", 400)
    if body.decision not in DECISIONS:
        return _error("Invalid decision", 400)

    if not settings.mail_configured:
        logger.error("Mailjet credentials not configured")
        return _error("Email service not configured", 500)

    content = render_decision_email(
        name=body.name, decision=body.decision, feedback=body.feedback,
        brand=settings.brand_name, year=settings.program_year,
    )
    try:
        await send_mail(body.to, body.name, content)
    except MailerError as e:
        logger.error("Email sending error: %s", e)
        return _error("Failed to send email", 500)
    return SendEmailOut(success=True)
