"""
Notification Service - order emails
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import Dict, Optional

from app.config import settings

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for sending order notifications"""
    
    def __init__(self, email_service: Optional[str] = None):
        self.email_service = (email_service or settings.EMAIL_SERVICE).lower()
    
    def send_order_confirmed(self, order_data: Dict) -> bool:
        """
        Send notification for a confirmed (paid) order
        
        Args:
            order_data: Order fields (order_id, quantity, amount_paid, customer_email, ...)
        
        Returns:
            True if the notification was handed off
        """
        order_id = order_data.get("order_id")
        subject = f"Order #{order_id} confirmed"
        body = (
            "Hi!\n\n"
            "Your payment was received and your order is confirmed.\n\n"
            f"Order ID: {order_id}\n"
            f"Product: {order_data.get('product_name', '')}\n"
            f"Size: {order_data.get('size_selected', '')}\n"
            f"Quantity: {order_data.get('quantity')}\n"
            f"Amount paid: {order_data.get('amount_paid')} {settings.CURRENCY}\n\n"
            "Thank you for your purchase!\n"
        )
        return self._send(order_data.get("customer_email"), subject, body, order_id)
    
    def send_order_status_changed(self, order_data: Dict) -> bool:
        """Send notification for an order status change"""
        order_id = order_data.get("order_id")
        subject = f"Order #{order_id} status updated"
        body = (
            "Hi!\n\n"
            "Your order status has been updated:\n\n"
            f"Order ID: {order_id}\n"
            f"Previous status: {order_data.get('old_status')}\n"
            f"New status: {order_data.get('new_status')}\n"
        )
        return self._send(order_data.get("customer_email"), subject, body, order_id)
    
    def _send(self, to: Optional[str], subject: str, body: str, order_id) -> bool:
        if self.email_service == "disabled":
            return False
        if not to:
            logger.debug("No customer email for order %s, skipping notification", order_id)
            return False
        
        if self.email_service == "console":
            return self._send_console_notification(to, subject, body, order_id)
        elif self.email_service == "smtp":
            return self._send_smtp_notification(to, subject, body)
        
        logger.warning("Unknown email service: %s", self.email_service)
        return False
    
    def _send_console_notification(self, to: str, subject: str, body: str, order_id) -> bool:
        """Log the email instead of sending it (development)"""
        logger.info("EMAIL to=%s subject=%r order=%s\n%s", to, subject, order_id, body)
        return True
    
    def _send_smtp_notification(self, to: str, subject: str, body: str) -> bool:
        message = EmailMessage()
        message["From"] = settings.EMAIL_FROM
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            smtp.starttls()
            if settings.SMTP_USER:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            smtp.send_message(message)
        
        logger.info("Email sent to %s: %s", to, subject)
        return True


def notify_safely(send, order_data: Dict) -> None:
    """Run a notification call; failures are logged, never raised"""
    try:
        send(order_data)
    except Exception:
        logger.exception("Failed to send notification for order %s", order_data.get("order_id"))
