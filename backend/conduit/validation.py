"""
Conduit Backend — Declarative Field Rules
===========================================

What:  Small rule objects (required, length, email, url) and the helpers that
       evaluate them inside Pydantic field validators.
How:   Every rule of a field is evaluated (no short-circuit), producing an
       ordered list of messages. `enforce` raises a PydanticCustomError whose
       context carries the full list; the RequestValidationError handler in
       main.py turns it into {"errors": {<field>: [<message>, ...]}}.
Who:   Request schemas in conduit.schemas.*.

Values are checked as text: None counts as "", so a missing required field
reports every rule it breaks, e.g. a missing username yields both
"Username cannot be empty" and the length message.

Rule sets live next to the schemas that use them, e.g.:

    USERNAME_RULES = (
        required("Username cannot be empty"),
        length("Username must be between 3 and 20 characters", min=3, max=20),
    )
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

_url_adapter = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class Rule:
    """A predicate over the field's text value plus the message shown on failure."""

    check: Callable[[str], bool]
    message: str


# ── Rule Constructors ─────────────────────────────────────────────────────
def required(message: str) -> Rule:
    return Rule(lambda v: len(v) > 0, message)


def length(message: str, min: int = 0, max: Optional[int] = None) -> Rule:
    def _check(v: str) -> bool:
        if len(v) < min:
            return False
        return max is None or len(v) <= max

    return Rule(_check, message)


def _is_email(v: str) -> bool:
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def email(message: str) -> Rule:
    return Rule(_is_email, message)


def _is_url(v: str) -> bool:
    if not v or any(c.isspace() for c in v):
        return False
    # Bare host names ("example.com/a.png") are accepted as URLs
    candidate = v if "://" in v else f"http://{v}"
    try:
        _url_adapter.validate_python(candidate)
    except PydanticValidationError:
        return False
    return True


def url(message: str) -> Rule:
    return Rule(_is_url, message)


# ── Evaluation ────────────────────────────────────────────────────────────
def check_rules(value: Any, rules: Sequence[Rule]) -> List[str]:
    """Returns the message of every rule the value breaks, in rule order."""
    text = "" if value is None else str(value)
    return [rule.message for rule in rules if not rule.check(text)]


def enforce(value: Any, rules: Sequence[Rule]) -> Any:
    """
    Raises a field error listing every broken rule, or returns the value.

    Raises:
        PydanticCustomError: type "field_rules"; ctx["messages"] holds all
        messages, the error text is the first one.
    """
    messages = check_rules(value, rules)
    if messages:
        raise PydanticCustomError("field_rules", messages[0], {"messages": messages})
    return value


def enforce_optional(value: Any, rules: Sequence[Rule]) -> Any:
    """Like enforce, but an omitted (None) value is accepted."""
    if value is None:
        return value
    return enforce(value, rules)
