# utils/parsing.py

"""
Bulk user input parsing and password generation
"""

import secrets
import string
from typing import List, Iterable, Dict, Any, Optional

from identity_console.models.user import UserRecord

PASSWORD_PREFIX = "!A1"
PASSWORD_ALPHABET = string.ascii_letters + string.digits


def _non_blank_lines(text: str) -> List[str]:
    return [line for line in text.strip().split("\n") if line.strip()]


def count_input_lines(text: str) -> int:
    """Number of non-blank lines, before email validation"""
    if not text or not text.strip():
        return 0
    return len(_non_blank_lines(text))


def _is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and "@" in email


def parse_user_records(text: str) -> List[UserRecord]:
    """Parse `email,firstName,lastName[,password]` lines.

    Lines without a usable email are dropped silently.
    """
    records = []
    if not text:
        return records

    for line in _non_blank_lines(text):
        parts = [p.strip() for p in line.split(",")]
        parts += [""] * (4 - len(parts))
        email, first_name, last_name, password = parts[:4]
        if not _is_valid_email(email):
            continue
        records.append(UserRecord(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password=password or None
        ))

    return records


def records_from_dicts(users: Iterable[Dict[str, Any]]) -> List[UserRecord]:
    """Build records from already-split user dicts, same filtering as text input"""
    records = []
    for user in users:
        if not isinstance(user, dict):
            continue
        email = user.get("email")
        if not isinstance(email, str) or not _is_valid_email(email.strip()):
            continue
        records.append(UserRecord(
            email=email.strip(),
            first_name=_as_text(user.get("first_name") or user.get("firstName")),
            last_name=_as_text(user.get("last_name") or user.get("lastName")),
            password=_as_text(user.get("password")) or None
        ))
    return records


def _as_text(value: Any) -> str:
    """Scalars become their string form; missing or structured values become empty"""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def generate_password(length: int = 12) -> str:
    body_length = max(length - len(PASSWORD_PREFIX), 1)
    body = "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(body_length))
    return PASSWORD_PREFIX + body


def format_user_records(records: Iterable[UserRecord]) -> str:
    return "\n".join(
        ",".join([r.email, r.first_name, r.last_name, r.password or ""])
        for r in records
    )


def fill_missing_passwords(text: str, length: int = 12) -> str:
    """Rewrite input so every valid record carries a password"""
    records = [
        r if r.password else r.model_copy(update={"password": generate_password(length)})
        for r in parse_user_records(text)
    ]
    return format_user_records(records)
