import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from med_reminder.clients import Mailer, SendGridMailer
from med_reminder.exceptions import DispatchError
from med_reminder.orch.models import EmailMessage
from med_reminder.security import verify_cron_token
from med_reminder.utils import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class SendEmailRequest(BaseModel):
    to: Optional[str] = None
    sender: Optional[str] = Field(default=None, alias="from")
    subject: Optional[str] = None
    html: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


def get_relay_mailer() -> Iterator[Mailer]:
    mailer = SendGridMailer(settings.SENDGRID_API_KEY)
    try:
        yield mailer
    finally:
        mailer.close()


@router.post("/send-email", dependencies=[Depends(verify_cron_token)])
def send_email_handler(
    request: SendEmailRequest,
    mailer: Mailer = Depends(get_relay_mailer),
):
    """
    Relay used by HttpMailer: forwards one email to SendGrid.
    """
    if not request.to or not request.subject or not request.html:
        return JSONResponse(status_code=400, content={"message": "Missing required fields"})

    message = EmailMessage(
        to=request.to,
        sender=request.sender or settings.MAIL_FROM,
        subject=request.subject,
        html=request.html,
    )
    try:
        mailer.send_email(message)
    except DispatchError as e:
        logger.error(f"❌ Email sending error: {e}")
        return JSONResponse(
            status_code=500,
            content={"message": "Failed to send email", "error": str(e)},
        )

    return {"message": "Email sent successfully"}
