"""
Reference data: service categories, service options and their durations.

Everything in this module is process-wide and read-only.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple, Union

from .exceptions import UnknownServiceError, ValidationError


class ServiceOption(str, Enum):
    """A bookable offering. The value is the identifier sent over the wire."""

    WOMENS_HAIRCUT = "Women's Haircut"
    SHAMPOO_BLOW_DRY = "Shampoo Blow Dry"
    FULL_HAIR_COLOR = "Full Hair Color"
    HIGHLIGHTS = "Highlights"
    MENS_HAIRCUT = "Men's Haircut"
    MENS_BEARD = "Men's Beard"
    CHILDRENS_HAIRCUT = "Children's Haircut"

    @classmethod
    def from_id(cls, service_id: Union["ServiceOption", str]) -> "ServiceOption":
        """
        Resolve a service identifier to its enum member.

        Raises:
            UnknownServiceError: If the identifier is not a known service
        """
        if isinstance(service_id, cls):
            return service_id
        try:
            return cls(service_id)
        except ValueError:
            raise UnknownServiceError(str(service_id)) from None

    @property
    def duration_minutes(self) -> int:
        return DEFAULT_CATALOG.duration_of(self)

    def __str__(self) -> str:
        return self.value


class ServiceCategory(str, Enum):
    """Gender/age group a booking is made for."""

    WOMAN = "woman"
    MAN = "man"
    CHILD = "child"

    @classmethod
    def parse(cls, name: Union["ServiceCategory", str]) -> "ServiceCategory":
        """Parse a category name case-insensitively."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValidationError(
                f"Unknown category '{name}'. Choose one of: {choices}."
            ) from None

    @property
    def services(self) -> Tuple[ServiceOption, ...]:
        """Services offered for this category, in display order."""
        return CATEGORY_SERVICES[self]

    def offers(self, service: ServiceOption) -> bool:
        return service in CATEGORY_SERVICES[self]

    def __str__(self) -> str:
        return self.value


CATEGORY_SERVICES: Mapping[ServiceCategory, Tuple[ServiceOption, ...]] = MappingProxyType({
    ServiceCategory.WOMAN: (
        ServiceOption.WOMENS_HAIRCUT,
        ServiceOption.SHAMPOO_BLOW_DRY,
        ServiceOption.FULL_HAIR_COLOR,
        ServiceOption.HIGHLIGHTS,
    ),
    ServiceCategory.MAN: (
        ServiceOption.MENS_HAIRCUT,
        ServiceOption.MENS_BEARD,
    ),
    ServiceCategory.CHILD: (
        ServiceOption.CHILDRENS_HAIRCUT,
    ),
})

SERVICE_DURATIONS: Mapping[ServiceOption, int] = MappingProxyType({
    ServiceOption.WOMENS_HAIRCUT: 45,
    ServiceOption.SHAMPOO_BLOW_DRY: 30,
    ServiceOption.FULL_HAIR_COLOR: 120,
    ServiceOption.HIGHLIGHTS: 90,
    ServiceOption.MENS_HAIRCUT: 30,
    ServiceOption.MENS_BEARD: 20,
    ServiceOption.CHILDRENS_HAIRCUT: 20,
})


class DurationCatalog:
    """
    Read-only lookup from service to duration in minutes.

    Invariant: every duration is a positive integer.
    """

    def __init__(self, durations: Mapping[ServiceOption, int] = SERVICE_DURATIONS):
        invalid = [service for service, minutes in durations.items() if minutes <= 0]
        if invalid:
            raise ValueError(f"Durations must be positive, got invalid entries for {invalid}")
        self._durations: Mapping[ServiceOption, int] = MappingProxyType(dict(durations))

    def __contains__(self, service_id: object) -> bool:
        try:
            return ServiceOption.from_id(service_id) in self._durations  # type: ignore[arg-type]
        except UnknownServiceError:
            return False

    def duration_of(self, service_id: Union[ServiceOption, str]) -> int:
        """
        Get the duration of a single service.

        Raises:
            UnknownServiceError: If the service has no catalog entry
        """
        service = ServiceOption.from_id(service_id)
        try:
            return self._durations[service]
        except KeyError:
            raise UnknownServiceError(service.value) from None

    def total_minutes(self, service_ids: Iterable[Union[ServiceOption, str]]) -> int:
        """Sum the durations of all given services, back to back."""
        return sum(self.duration_of(service_id) for service_id in service_ids)

    def resolve(self, service_ids: Iterable[Union[ServiceOption, str]]) -> List[ServiceOption]:
        """Resolve identifiers to catalog services, keeping order and dropping duplicates."""
        resolved: List[ServiceOption] = []
        for service_id in service_ids:
            service = ServiceOption.from_id(service_id)
            if service not in self._durations:
                raise UnknownServiceError(service.value)
            if service not in resolved:
                resolved.append(service)
        return resolved


DEFAULT_CATALOG = DurationCatalog()
