from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Callable, Optional, Sequence

from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mimetype: str


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    username: Optional[str]
    password: Optional[str]
    from_email: str
    use_tls: bool = True


class SmtpMailer:
    """Send HTML mail with attachments through an SMTP relay."""

    def __init__(self, config: SmtpConfig, *, smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP, timeout: float = 30.0):
        self._config = config
        self._smtp_factory = smtp_factory
        self._timeout = timeout

    def build_message(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._config.from_email
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This report is best viewed in an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        for a in attachments:
            maintype, _, subtype = a.mimetype.partition("/")
            msg.add_attachment(a.content, maintype=maintype, subtype=subtype, filename=a.filename)
        return msg

    def send(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        msg = self.build_message(to=to, subject=subject, html=html, attachments=attachments)
        try:
            with self._smtp_factory(self._config.host, self._config.port, timeout=self._timeout) as smtp:
                if self._config.use_tls:
                    smtp.starttls()
                if self._config.username:
                    smtp.login(self._config.username, self._config.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("sending mail to %s failed: %s", to, e)
            raise ExternalServiceError("Failed to send report email", upstream_status="SMTP", details=str(e)) from e
        logger.info("mail sent to %s", to)
