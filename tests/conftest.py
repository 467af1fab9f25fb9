"""Pytest configuration and shared fixtures for fluentrules tests."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
import structlog

from fluentrules.validation import ValidationContext


@dataclass
class Address:
    line1: str | None = None
    postcode: str | None = None


@dataclass
class Person:
    name: str | None = None
    surname: str | None = None
    age: int = 0
    email: str | None = None
    is_company: bool = False
    company_number: str | None = None
    address: Address | None = None
    tags: list[str] = field(default_factory=list)


class Optional:
    """Minimal optional wrapper for projection tests."""

    def __init__(self, value: Any = None, has_value: bool = False):
        self.value = value
        self.has_value = has_value

    @classmethod
    def of(cls, value: Any) -> Optional:
        return cls(value, True)

    @classmethod
    def empty(cls) -> Optional:
        return cls()

    def __repr__(self) -> str:
        return f"Optional.of({self.value!r})" if self.has_value else "Optional.empty()"


@dataclass
class OptionalPerson:
    name: Optional = field(default_factory=Optional.empty)


class CallRecorder:
    """Callable predicate that records every call."""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls: list[Any] = []

    def __call__(self, value: Any) -> bool:
        self.calls.append(value)
        return self.result


@pytest.fixture
def person() -> Person:
    return Person(name="Ada", surname="Lovelace", age=36, email="ada@example.com")


@pytest.fixture
def context(person: Person) -> ValidationContext:
    ctx = ValidationContext(person)
    ctx.initialize_for_property_validator("name", lambda _: "Name", "name")
    return ctx


@pytest.fixture
def reset_logging():
    """Restore structlog defaults and root handlers after a test reconfigures logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)
