"""SNS service for booking, session-update and message notifications."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class NotificationService:
    """
    Publishes user notifications to an SNS topic.

    Every public method is meant to run as a background task: failures are
    logged and swallowed so they never affect the request that triggered
    them. With no topic configured nothing is published.
    """

    def __init__(self, topic_arn: str | None = None, client: Any = None):
        """Initialize SNS client with settings."""
        self.topic_arn = topic_arn if topic_arn is not None else settings.notifications_topic_arn
        if client is None:
            client_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
            # Support LocalStack by pointing to a custom endpoint
            if settings.aws_sns_endpoint_url:
                client_kwargs["endpoint_url"] = settings.aws_sns_endpoint_url
            client = boto3.client("sns", **client_kwargs)
        self.sns_client = client

    def send(self, *, notification_type: str, user_id: str, title: str, message: str, data: dict) -> str | None:
        """Publish one notification. Returns the SNS message id, or None if skipped or failed."""
        if not self.topic_arn:
            logger.debug("No notifications topic configured; skipping %s for %s", notification_type, user_id)
            return None

        payload = {
            "type": notification_type,
            "userId": user_id,
            "title": title,
            "message": message,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = self.sns_client.publish(
                TopicArn=self.topic_arn,
                Message=json.dumps(payload, default=str),
                MessageAttributes={
                    "notification_type": {"DataType": "String", "StringValue": notification_type},
                    "user_id": {"DataType": "String", "StringValue": user_id},
                },
            )
        except (BotoCoreError, ClientError):
            logger.exception("Failed to send %s notification to %s", notification_type, user_id)
            return None
        return response.get("MessageId")

    def notify_session_booked(
        self,
        *,
        session_id: int,
        student_id: str,
        student_name: str,
        counsellor_id: str,
        counsellor_name: str,
        scheduled_at: datetime,
    ) -> None:
        """Tell both the student and the counsellor about a new booking."""
        data = {
            "sessionId": session_id,
            "studentName": student_name,
            "counsellorName": counsellor_name,
            "scheduledAt": scheduled_at.isoformat(),
        }
        message = (
            f"A new session has been booked between {student_name} and {counsellor_name} "
            f"on {scheduled_at:%Y-%m-%d %H:%M} UTC"
        )
        for user_id in (student_id, counsellor_id):
            self.send(
                notification_type="session_booking",
                user_id=user_id,
                title="New Session Booking",
                message=message,
                data=data,
            )

    def notify_session_updated(self, *, user_id: str, session_id: int, status: str, scheduled_at: datetime) -> None:
        self.send(
            notification_type="session_update",
            user_id=user_id,
            title="Session Update",
            message=f"Your session scheduled for {scheduled_at:%Y-%m-%d} has been {status}",
            data={"sessionId": session_id, "status": status, "scheduledAt": scheduled_at.isoformat()},
        )

    def notify_message_received(self, *, user_id: str, message_id: int, sender_name: str) -> None:
        self.send(
            notification_type="message_received",
            user_id=user_id,
            title="New Message",
            message=f"You have received a new message from {sender_name}",
            data={"messageId": message_id, "senderName": sender_name},
        )


notification_service = NotificationService()
