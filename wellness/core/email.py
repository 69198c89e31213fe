import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from urllib.parse import urlencode
from typing import List, Optional

from wellness.config import settings
from wellness.core.logging import logger


async def send_email(
    to: List[str],
    subject: str,
    body: str,
    html_body: Optional[str] = None
) -> bool:
    """
    Send an email over SMTP.

    Args:
        to: List of recipient email addresses
        subject: Email subject
        body: Plain text email body
        html_body: Optional HTML email body

    Returns:
        bool: True if email sent successfully
    """
    if not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        logger.warning(f"SMTP credentials not configured, skipping email to {', '.join(to)}")
        return False

    logger.info(f"Sending email to {', '.join(to)}")

    message = MIMEMultipart("alternative")
    message["From"] = settings.EMAIL_FROM
    message["To"] = ", ".join(to)
    message["Subject"] = subject
    message.attach(MIMEText(body, "plain"))
    if html_body:
        message.attach(MIMEText(html_body, "html"))

    try:
        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=True,
        )
    except aiosmtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed for {settings.SMTP_USER}@{settings.SMTP_HOST}: {e}")
        return False
    except aiosmtplib.SMTPException as e:
        logger.error(f"SMTP error sending email to {to}: {type(e).__name__}: {e}")
        return False

    logger.info(f"Email sent successfully to {', '.join(to)}")
    return True


def build_invitation_link(token: str, email: str) -> str:
    """Registration link carried by an invitation email."""
    return f"{settings.INVITE_BASE_URL.rstrip('/')}/{token}?{urlencode({'email': email})}"


async def send_invitation_email(email: str, name: str, role: str, invited_by: Optional[str], token: str) -> bool:
    """
    Send an invitation to join the practice.

    Args:
        email: Recipient email address
        name: Invitee's name
        role: Role the invitee will have
        invited_by: Name of the admin who sent the invitation
        token: Invitation token

    Returns:
        bool: True if email sent successfully
    """
    link = build_invitation_link(token, email)
    inviter = invited_by or "An administrator"

    subject = f"You're invited to {settings.APP_NAME}"

    body = f"""
    Hello {name},

    {inviter} has invited you to join {settings.APP_NAME} as {role}.

    Complete your registration here:
    {link}

    If you weren't expecting this invitation, you can ignore this email.
    """

    html_body = f"""
    <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #2563EB;">You're invited to {settings.APP_NAME}</h2>
                <p>Hello {name},</p>
                <p>{inviter} has invited you to join as <strong>{role}</strong>.</p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{link}"
                       style="background-color: #2563EB; color: white; padding: 12px 30px;
                              text-decoration: none; border-radius: 5px; display: inline-block;">
                        Complete Registration
                    </a>
                </div>
                <p style="color: #666; font-size: 14px;">
                    If you weren't expecting this invitation, you can ignore this email.
                </p>
            </div>
        </body>
    </html>
    """

    return await send_email([email], subject, body, html_body)
