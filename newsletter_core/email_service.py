#!/usr/bin/env python3
import random
import re
import string
import time
import uuid
from typing import Optional

from .config import config as default_config

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_BASE36 = string.digits + string.ascii_lowercase


class EmailService:
    """Disposable addresses used to receive newsletter confirmation mail"""

    def __init__(self, domain: Optional[str] = None):
        self.domain = domain or default_config.email_domain

    def generate_email(self) -> str:
        """Unique address for one subscription"""
        timestamp = int(time.time() * 1000)
        random_id = uuid.uuid4().hex[:8]
        return f"newsletter-{timestamp}-{random_id}@{self.domain}"

    def generate_temp_email(self) -> str:
        """Throwaway address for test runs"""
        timestamp = int(time.time() * 1000)
        random_id = "".join(random.choice(_BASE36) for _ in range(6))
        return f"temp-{timestamp}-{random_id}@{self.domain}"

    @staticmethod
    def is_valid_email(email: str) -> bool:
        return bool(EMAIL_PATTERN.match(email or ""))

    @staticmethod
    def get_domain(email: str) -> str:
        parts = (email or "").split("@")
        return parts[1] if len(parts) > 1 else ""
