from typing import Any, Dict
import logging
import httpx
from tenacity import retry, stop_after_attempt, wait_exponential_jitter, retry_if_exception_type

from .settings import settings
from .templates import EmailContent

logger = logging.getLogger(__name__)

class MailerError(Exception):
    pass

def build_message(to: str, name: str, content: EmailContent) -> Dict[str, Any]:
    return {
        "Messages": [
            {
                "From": {"Email": settings.mailjet_from_email, "Name": settings.mailjet_from_name},
                "To": [{"Email": to, "Name": name}],
                "Subject": content.subject,
                "TextPart": content.text,
                "HTMLPart": content.html,
            }
        ]
    }

# only connection-level failures are retried; an error response from Mailjet is final
@retry(
    reraise=True,
    stop=stop_after_attempt(settings.send_max_attempts),
    wait=wait_exponential_jitter(initial=settings.send_backoff_seconds, max=5),
    retry=retry_if_exception_type(httpx.TransportError),
)
async def _post(message: Dict[str, Any]) -> httpx.Response:
    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as client:
        return await client.post(
            settings.mailjet_api_url,
            json=message,
            auth=(settings.mailjet_api_key or "", settings.mailjet_secret_key or ""),
        )

async def send_mail(to: str, name: str, content: EmailContent) -> None:
    try:
        resp = await _post(build_message(to, name, content))
    except httpx.HTTPError as e:
        raise MailerError(f"Mailjet unreachable: {e}") from e
    if resp.status_code >= 400:
        logger.error("Mailjet error %s: %s", resp.status_code, resp.text[:500])
        raise MailerError("Failed to send email")
    logger.info("Sent '%s' to %s", content.subject, to)
