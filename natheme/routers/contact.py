# natheme/routers/contact.py

from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from natheme import settings
from natheme.db import get_session
from natheme.models import ContactCreate, ContactMessage, ContactResponse
from natheme.notifications import format_contact_email, is_email_configured, send_email


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def send_contact_message(
    contact: ContactCreate,
    session: Annotated[Session, Depends(get_session)],
):
    """
    Store a contact-form message and relay it to the company inbox.

    The message is kept even when the email cannot be delivered.
    """
    if not contact.name.strip() or not contact.email.strip() or not contact.message.strip():
        raise HTTPException(status_code=400, detail="All fields (name, email, message) are required.")

    message_db = ContactMessage(name=contact.name, email=contact.email, message=contact.message)
    session.add(message_db)
    session.commit()
    session.refresh(message_db)
    logger.info(f"Contact message ID {message_db.id} stored.")

    if not is_email_configured():
        logger.warning("Email relay is not configured, contact message was not forwarded.")
        return ContactResponse(success=True, message="Message received.")

    subject, body = format_contact_email(contact.name, contact.email, contact.message)
    if not send_email(settings.CONTACT_RECEIVER_EMAIL, subject, body):
        raise HTTPException(status_code=500, detail="Server error while sending message.")

    return ContactResponse(success=True, message="Message received and email sent.")
