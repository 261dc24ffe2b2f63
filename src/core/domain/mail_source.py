"""Mailbox choices for the email-to-ERP workflow."""

from __future__ import annotations

from enum import Enum


class MailSource(str, Enum):
    """Where the order email is read from."""

    GMAIL = "gmail"
    OUTLOOK = "outlook"

    def label(self) -> str:
        """Human readable label for logging."""

        return "Gmail" if self is MailSource.GMAIL else "Outlook"
