from typing import Any, Dict, Optional

import httpx

from portfolio.config import settings
from portfolio.utils.logger import logger
from portfolio.utils.security import mask_email

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailService:
    """Forwards contact-form and service-inquiry submissions through the EmailJS REST API."""

    def __init__(
        self,
        service_id: Optional[str] = None,
        public_key: Optional[str] = None,
        private_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_id = service_id or settings.EMAILJS_SERVICE_ID
        self.public_key = public_key or settings.EMAILJS_PUBLIC_KEY
        self.private_key = private_key or settings.EMAILJS_PRIVATE_KEY
        self.contact_template_id = settings.EMAILJS_TEMPLATE_ID
        self.inquiry_template_id = settings.EMAILJS_INQUIRY_TEMPLATE_ID or settings.EMAILJS_TEMPLATE_ID
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.public_key and self.contact_template_id)

    async def send_contact(self, params: Dict[str, Any]) -> bool:
        return await self._send(self.contact_template_id, params)

    async def send_inquiry(self, params: Dict[str, Any]) -> bool:
        return await self._send(self.inquiry_template_id, params)

    async def _send(self, template_id: Optional[str], params: Dict[str, Any]) -> bool:
        """Sends one templated email. Returns False on any provider or network failure."""
        if not (self.configured and template_id):
            logger.error("EmailJS is not configured; message not sent.")
            return False

        payload = {
            "service_id": self.service_id,
            "template_id": template_id,
            "user_id": self.public_key,
            "template_params": params,
        }
        if self.private_key:
            payload["accessToken"] = self.private_key

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(EMAILJS_SEND_URL, json=payload, timeout=10.0)
                response.raise_for_status()
                logger.info(f"Email sent for {mask_email(str(params.get('from_email', '')))}")
                return True
            except httpx.HTTPStatusError as e:
                logger.error(f"EmailJS API Error: {e.response.status_code} {e.response.text}")
                return False
            except Exception as e:
                logger.error(f"Error sending email: {str(e)}")
                return False
