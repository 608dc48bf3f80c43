"""Dispatch plans: which recipients and which template per alert category.

Recipient lists are configuration data. They are loaded once at process
start, either from a JSON file or from the built-in defaults, and are
read-only afterwards.

The JSON file maps category values to ordered recipient lists:

    {
        "standard": [{"address": "112", "role": "emergency-services"}],
        "weather_emergency": [{"address": "112", "role": "emergency-services"}]
    }
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from emergency_alert_dispatch.dispatch.errors import (
    ConfigurationError,
    UnknownCategoryError,
)
from emergency_alert_dispatch.dispatch.formatter import DEFAULT_TEMPLATES, MessageTemplate
from emergency_alert_dispatch.dispatch.models import AlertCategory, Recipient

if TYPE_CHECKING:
    from emergency_alert_dispatch.config import Settings

logger = logging.getLogger(__name__)

# Emergency services go first so they are reached before the pacing delay adds up
DEFAULT_RECIPIENTS: Mapping[AlertCategory, tuple[Recipient, ...]] = MappingProxyType(
    {
        AlertCategory.STANDARD: (
            Recipient(address="112", role="emergency-services"),
            Recipient(address="+919876543210", role="family"),
            Recipient(address="+919876543211", role="friend"),
            Recipient(address="+911234567890", role="contact"),
        ),
        AlertCategory.WEATHER_EMERGENCY: (
            Recipient(address="112", role="emergency-services"),
            Recipient(address="1070", role="weather-helpline"),
        ),
    }
)


class RecipientConfig(BaseModel):
    """One recipient entry in a recipients file."""

    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(min_length=1, description="Phone number or short code")
    role: str = Field(default="contact", min_length=1)

    def to_recipient(self) -> Recipient:
        return Recipient(address=self.address, role=self.role)


RecipientsFile = TypeAdapter(
    dict[AlertCategory, Annotated[list[RecipientConfig], Field(min_length=1)]]
)


@dataclass(frozen=True)
class ResolvedPlan:
    """Template and ordered recipients for one alert category."""

    category: AlertCategory
    template: MessageTemplate
    recipients: tuple[Recipient, ...]


class DispatchPlan:
    """Read-only mapping from alert category to its resolved plan."""

    def __init__(
        self,
        recipients_by_category: Mapping[AlertCategory, Sequence[Recipient]],
        templates: Mapping[AlertCategory, MessageTemplate] | None = None,
    ) -> None:
        """Initialize the plan.

        Args:
            recipients_by_category: Ordered recipients per category.
            templates: Message template per category. Defaults to the
                built-in standard and weather templates.

        Raises:
            ConfigurationError: If a category has no recipients or no template.
        """
        templates = DEFAULT_TEMPLATES if templates is None else templates

        plans: dict[AlertCategory, ResolvedPlan] = {}
        for category, recipients in recipients_by_category.items():
            if not recipients:
                raise ConfigurationError(f"No recipients configured for {category.value}")
            if category not in templates:
                raise ConfigurationError(f"No message template for {category.value}")
            plans[category] = ResolvedPlan(
                category=category,
                template=templates[category],
                recipients=tuple(recipients),
            )
        self._plans = MappingProxyType(plans)

    @property
    def categories(self) -> tuple[AlertCategory, ...]:
        """Return the categories this plan can resolve."""
        return tuple(self._plans)

    def resolve(self, category: AlertCategory) -> ResolvedPlan:
        """Resolve the template and recipients for a category.

        Raises:
            UnknownCategoryError: If the category has no configured plan.
        """
        try:
            return self._plans[category]
        except (KeyError, TypeError):
            raise UnknownCategoryError(category) from None


def load_recipients(path: Path) -> dict[AlertCategory, tuple[Recipient, ...]]:
    """Load recipient lists from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be read, fails validation
            or leaves an alert category without recipients.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read recipients file {path}: {e}") from e

    try:
        parsed = RecipientsFile.validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid recipients file {path}: {e}") from e

    missing = [category.value for category in AlertCategory if category not in parsed]
    if missing:
        raise ConfigurationError(
            f"Recipients file {path} has no recipients for: {', '.join(missing)}"
        )

    return {
        category: tuple(entry.to_recipient() for entry in entries)
        for category, entries in parsed.items()
    }


def build_dispatch_plan(settings: Settings) -> DispatchPlan:
    """Build the dispatch plan from settings or the built-in defaults."""
    recipients_file = settings.dispatch.recipients_file
    if recipients_file is None:
        logger.info("Using built-in recipient lists")
        return DispatchPlan(DEFAULT_RECIPIENTS)

    recipients = load_recipients(recipients_file)
    logger.info(
        f"Loaded recipients for {len(recipients)} categories from {recipients_file}"
    )
    return DispatchPlan(recipients)
