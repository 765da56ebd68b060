"""
Contact form submission with an optional visit appointment.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from realty_site.error_handling import ValidationError
from realty_site.store import DataStore


logger = logging.getLogger(__name__)

AVAILABLE_TIMES = ('09:00', '10:00', '11:00', '14:00', '15:00', '16:00', '17:00')

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SUBMIT_ERROR_MESSAGE = "Erro ao enviar mensagem. Por favor, tente novamente."


@dataclass
class ContactRequest:
    """A visitor's message, optionally asking for a visit."""
    name: str
    email: str
    message: str
    phone: str = ""
    visit_date: Optional[date] = None
    visit_time: Optional[str] = None

    def validate(self) -> None:
        """Raise ValidationError with a user-facing message if invalid."""
        if not self.name.strip() or not self.email.strip() or not self.message.strip():
            raise ValidationError("Preencha todos os campos obrigatórios")
        if not _EMAIL.match(self.email.strip()):
            raise ValidationError("E-mail inválido")
        if self.visit_time and self.visit_time not in AVAILABLE_TIMES:
            raise ValidationError(f"Horário indisponível: {self.visit_time}")

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "email": self.email.strip(),
            "phone": self.phone.strip(),
            "message": self.message.strip(),
            "visit_date": self.visit_date.isoformat() if self.visit_date else None,
            "visit_time": self.visit_time or None,
            "status": "pending",
        }


class ContactForm:
    """Stores contact requests in ``contact_forms``."""

    TABLE = "contact_forms"

    def __init__(self, store: DataStore):
        self.store = store

    async def submit(self, request: ContactRequest) -> Dict[str, Any]:
        """Validate and store a request.

        Raises:
            ValidationError: If a required field is missing or malformed
            StoreError: If the store rejects the insert
        """
        request.validate()
        rows = await self.store.insert(self.TABLE, request.to_row())
        logger.info(f"Contact request stored for {request.email}")
        return rows[0] if rows else request.to_row()
