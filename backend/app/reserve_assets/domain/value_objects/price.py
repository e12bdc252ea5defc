"""Price value object for values quoted in the unit of account."""

from dataclasses import dataclass

from app.reserve_assets.domain.value_objects.fix import Fix


@dataclass(frozen=True)
class Price:
    """Immutable value object representing a {UoA/tok} price.

    Attributes:
        value: The fixed-point price (never negative).
        is_fallback: True when the value came from a fallback strategy
            rather than the strict oracle path.
    """

    value: Fix
    is_fallback: bool = False

    def as_tuple(self) -> tuple[bool, Fix]:
        """Return ``(is_fallback, value)``."""
        return self.is_fallback, self.value
