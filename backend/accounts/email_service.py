# accounts/email_service.py
"""
Email service for account verification.

Sends one-time passcodes from DEFAULT_FROM_EMAIL. In development the
console backend prints the message instead of delivering it.
"""

import logging
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags
from django.conf import settings

logger = logging.getLogger(__name__)


def send_otp_email(user, code: str, company_name: str = "") -> bool:
    """
    Send a verification code to the user.

    Args:
        user: User model instance
        code: The 6-digit code
        company_name: Shown in the greeting when the company was just registered

    Returns:
        True if email was sent successfully, False otherwise
    """
    context = {
        "user_name": user.username.split("-", 1)[-1],
        "company_name": company_name,
        "code": code,
        "expiry_minutes": settings.OTP_EXPIRY_MINUTES,
    }

    try:
        html_message = render_to_string("emails/otp.html", context)
        plain_message = strip_tags(html_message)

        send_mail(
            subject="Your TaskHub verification code",
            message=plain_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            html_message=html_message,
            fail_silently=False,
        )
        logger.info("Verification code sent", extra={"user_id": user.pk})
        return True
    except Exception as e:
        logger.error(f"Failed to send verification code to {user.email}: {e}")
        return False
