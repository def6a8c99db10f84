# ecogest/utils/identifiers.py
"""Matricule formatting and parsing.

A matricule is ``{prefix}{counter:03d}@{school_suffix}``, e.g. ``Eleve007@ecole_best``.
The authentication store cannot hold underscores in a domain, so the stored
login email becomes ``Eleve007@ecole-best.<auth_email_domain>``.
"""
import re
from typing import Dict, Optional

from ..core.config import settings

DEFAULT_PREFIXES: Dict[str, str] = {
    "student": "Eleve",
    "teacher": "Prof",
    "parent": "Parent",
}

IDENTIFIER_PATTERN = re.compile(r'^([A-Za-z]+?)(\d{3,})@([a-z0-9_]+)$')


def format_identifier(prefix: str, number: int, school_suffix: str) -> str:
    if number < 1:
        raise ValueError("Counter values start at 1")
    return f"{prefix}{number:03d}@{school_suffix}"


def parse_identifier(identifier: str, prefixes: Optional[Dict[str, str]] = None) -> Optional[Dict]:
    """Split ``Prof003@ecole_best`` into its parts, or return None."""
    if not identifier:
        return None
    match = IDENTIFIER_PATTERN.match(identifier.strip())
    if not match:
        return None

    prefix, digits, suffix = match.groups()
    prefixes = prefixes or DEFAULT_PREFIXES
    role = next((r for r, p in prefixes.items() if p.lower() == prefix.lower()), None)
    if role is None:
        return None

    return {
        "role": role,
        "prefix": prefix,
        "number": int(digits),
        "school_suffix": suffix,
        "matricule": f"{prefix}{digits}",
    }


def validate_identifier(identifier: str, expected_role: Optional[str] = None,
                        prefixes: Optional[Dict[str, str]] = None) -> bool:
    parsed = parse_identifier(identifier, prefixes)
    if parsed is None:
        return False
    return expected_role is None or parsed["role"] == expected_role


def suffix_to_domain(school_suffix: str, auth_domain: Optional[str] = None) -> str:
    return f"{school_suffix.replace('_', '-')}.{auth_domain or settings.auth_email_domain}"


def build_auth_email(matricule: str, school_suffix: str, auth_domain: Optional[str] = None) -> str:
    """Prof003 + ecole_best -> Prof003@ecole-best.ecogest.app"""
    return f"{matricule}@{suffix_to_domain(school_suffix, auth_domain)}"


def build_display_email(matricule: str, school_suffix: str) -> str:
    if '@' in matricule:
        return matricule
    return f"{matricule}@{school_suffix}"


def split_login(identifier: str):
    """Return (matricule, school_suffix) for a ``matricule@suffix`` login."""
    if not identifier or identifier.count('@') != 1:
        raise ValueError("Identifier must be in format: matricule@ecole")
    matricule, suffix = identifier.split('@')
    if not matricule or not suffix:
        raise ValueError("Identifier must be in format: matricule@ecole")
    return matricule, suffix


def to_auth_email(login: str, auth_domain: Optional[str] = None) -> str:
    """Map whatever a user typed at login to the stored auth email.

    ``Prof003@ecole_best`` is expanded; full emails (admins, or an already
    expanded auth email) pass through lower-cased on the domain part.
    """
    login = login.strip()
    matricule, domain = split_login(login)
    auth_domain = auth_domain or settings.auth_email_domain
    if '.' not in domain and re.match(r'^[a-z0-9_]+$', domain):
        return build_auth_email(matricule, domain, auth_domain)
    return f"{matricule}@{domain.lower()}"
