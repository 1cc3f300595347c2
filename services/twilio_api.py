from typing import Tuple

import requests
from loguru import logger


def send_whatsapp_message(
    base_url: str,
    account_sid: str,
    auth_token: str,
    from_number: str,
    to_number: str,
    body: str,
    timeout: float = 15,
) -> Tuple[bool, dict]:
    """Send one message through the Twilio Messages API.

    Returns ``(ok, payload)``; payload is the decoded response on success or an
    error description otherwise. Never raises for transport errors.
    """
    if not account_sid or not auth_token:
        logger.error("Twilio credentials missing (TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN)")
        return False, {"error": "Missing Twilio credentials"}
    if not to_number:
        logger.error("No WhatsApp recipient configured (WHATSAPP_TO)")
        return False, {"error": "Missing recipient"}

    url = f"{base_url.rstrip('/')}/Accounts/{account_sid}/Messages.json"
    payload = {"From": from_number, "To": to_number, "Body": body}
    preview = (body[:60] + "...") if len(body) > 60 else body
    logger.debug(f"Twilio POST {url} to={to_number} body='{preview}'")

    try:
        resp = requests.post(url, data=payload, auth=(account_sid, auth_token), timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"Twilio network issue: {e}")
        return False, {"error": str(e)}

    if resp.status_code in (200, 201):
        try:
            data = resp.json()
        except ValueError:
            data = {"status": resp.status_code, "text": resp.text}
        logger.info(f"Twilio accepted message sid={data.get('sid')}")
        return True, data

    detail = {"status": resp.status_code, "detail": resp.text[:500]}
    logger.warning(f"Twilio API non-2xx: {detail}")
    return False, detail
