"""
Best-effort notification emails for discussion membership changes.
"""

import logging

from booktalk.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


def notify_participation(mailer, user, discussion, joined: bool) -> bool:
    """Email the acting user about a join or unjoin.

    Failures are logged and swallowed; the membership change has already been
    committed. Returns True when the message was accepted.
    """
    if joined:
        subject = f"You joined \"{discussion.title}\""
        text = (
            f"Hi {user.name}, you are now a participant in \"{discussion.title}\" "
            f"on {discussion.date:%Y-%m-%d %H:%M} UTC. Meeting link: {discussion.meeting_link}"
        )
    else:
        subject = f"You left \"{discussion.title}\""
        text = f"Hi {user.name}, you are no longer a participant in \"{discussion.title}\"."

    try:
        mailer.send(user.email, subject, text_content=text, html_content=f"<p>{text}</p>")
    except EmailDeliveryError as e:
        logger.warning(f"Participation email to {user.email} failed: {e}")
        return False
    return True
