import logging
import threading

import requests

logger = logging.getLogger(__name__)


def send_email(config, to_email, to_name, subject, html):
    """Deliver one message through the transactional email API.

    Returns True when the API accepted it. Never raises.
    """
    api_key = config.get('MAIL_API_KEY')
    if not api_key:
        logger.warning("Email service not configured, skipping mail to %s", to_email)
        return False

    email_data = {
        "sender": {
            "name": config.get('MAIL_SENDER_NAME', 'EventEase'),
            "email": config.get('MAIL_SENDER')
        },
        "to": [
            {
                "email": to_email,
                "name": to_name or to_email
            }
        ],
        "subject": subject,
        "htmlContent": html
    }

    headers = {
        "accept": "application/json",
        "api-key": api_key,
        "content-type": "application/json"
    }

    try:
        response = requests.post(config['MAIL_API_URL'], headers=headers, json=email_data, timeout=10)
    except requests.RequestException as e:
        logger.warning("Email error for %s: %s", to_email, e)
        return False

    if response.status_code in (200, 201, 202):
        logger.info("Email sent to %s", to_email)
        return True

    logger.warning("Error sending email: %s, %s", response.status_code, response.text)
    return False


def send_async(config, to_email, to_name, subject, html):
    # copy the settings so the thread does not need an app context
    settings = {key: config.get(key) for key in ('MAIL_API_KEY', 'MAIL_API_URL', 'MAIL_SENDER', 'MAIL_SENDER_NAME')}
    thread = threading.Thread(
        target=send_email,
        args=(settings, to_email, to_name, subject, html),
        daemon=True
    )
    thread.start()
    return thread
