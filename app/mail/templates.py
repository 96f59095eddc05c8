from __future__ import annotations

from html import escape

ONE_TIME_CODE_SUBJECT = "Your OTP for Password Reset"


def one_time_code_text(code: str, user_name: str, expire_minutes: int) -> str:
    return (
        f"Hello {user_name},\n\n"
        "You have requested to reset your password. "
        f"Use the following code to complete the process: {code}\n\n"
        f"This code will expire in {expire_minutes} minutes.\n"
        "If you didn't request this password reset, please ignore this email.\n"
    )


def one_time_code_html(code: str, user_name: str, expire_minutes: int) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #333;">Password Reset OTP</h2>'
        f"<p>Hello {escape(user_name)},</p>"
        "<p>You have requested to reset your password. "
        "Please use the following code to complete the process:</p>"
        f'<h1 style="color: #007bff; letter-spacing: 5px;">{escape(code)}</h1>'
        f"<p><strong>This code will expire in {expire_minutes} minutes.</strong></p>"
        "<p>If you didn't request this password reset, please ignore this email.</p>"
        "</div>"
    )
