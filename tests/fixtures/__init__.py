"""Test fixtures: sample argument objects of every supported shape, plus DDL."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

_FIXTURES_DIR = Path(__file__).parent


def load_ddl() -> str:
    """Return the sample SQLite DDL used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()


# ---------------------------------------------------------------------------
# Bean-style objects (camelCase accessors)
# ---------------------------------------------------------------------------


class BeanAddress:
    """Exposes its properties only through ``getX()`` accessors."""

    def __init__(self, city: str, street: str = "1 Main St") -> None:
        self._city = city
        self._street = street

    def getCity(self) -> str:
        return self._city

    def getStreet(self) -> str:
        return self._street


class BeanStatus:
    """Exposes both ``isActive()`` and ``getActive()``."""

    def __init__(self, active: bool) -> None:
        self._active = active

    def isActive(self) -> bool:
        return self._active

    def getActive(self) -> str:
        return "yes" if self._active else "no"


# ---------------------------------------------------------------------------
# Pythonic objects (snake_case accessors, attributes, properties)
# ---------------------------------------------------------------------------


@dataclass
class Address:
    street: str
    city: str
    zip: str = "98101"


@dataclass
class Department:
    dept_id: int
    name: str
    tags: dict[str, str] = field(default_factory=dict)

    def is_remote(self) -> bool:
        return self.tags.get("remote") == "true"


@dataclass
class Employee:
    emp_id: int
    first_name: str
    department: Department
    address: Address
    salary: float = 0.0
    _ssn: str = "000-00-0000"

    def get_display_name(self) -> str:
        return f"{self.first_name} #{self.emp_id}"

    @property
    def full_address(self) -> str:
        return f"{self.address.street}, {self.address.city}"


class Slotted:
    __slots__ = ("zip",)

    def __init__(self, zip: str) -> None:
        self.zip = zip
