"""Domain entity representing a user."""

from dataclasses import dataclass


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    phone: str | None
