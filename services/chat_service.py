from core.config import settings
from core.errors import NotificationError
from services import twilio_api


class ChatService:
    """Delivers reminder text to the configured WhatsApp recipient."""

    def __init__(self) -> None:
        self.base_url = settings.twilio_base_url
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self.from_number = settings.whatsapp_from
        self.to_number = settings.whatsapp_to
        self.timeout = settings.twilio_timeout_seconds

    def send_message(self, message: str) -> str | None:
        """Send ``message``; return the provider message id.

        Raises ``NotificationError`` when the provider does not accept it.
        """
        ok, data = twilio_api.send_whatsapp_message(
            self.base_url,
            self.account_sid,
            self.auth_token,
            self.from_number,
            self.to_number,
            message,
            timeout=self.timeout,
        )
        if not ok:
            reason = data.get("error") or f"HTTP {data.get('status')}: {data.get('detail', '')}"
            raise NotificationError(f"WhatsApp delivery failed: {reason}", detail=data)
        return data.get("sid")
