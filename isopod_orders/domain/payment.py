from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PaymentKind(str, Enum):
    COMPUTED = "computed"
    OVERRIDDEN = "overridden"


@dataclass(frozen=True)
class PaymentAmount:
    """Payment amount tagged with where it came from.

    The amount is derived from items and shipping by default; an operator may
    type a different figure, which stays in place until the next recompute.
    """

    value: float
    kind: PaymentKind = PaymentKind.COMPUTED

    @classmethod
    def computed(cls, value: float) -> "PaymentAmount":
        return cls(value=value, kind=PaymentKind.COMPUTED)

    @classmethod
    def overridden(cls, value: float) -> "PaymentAmount":
        return cls(value=value, kind=PaymentKind.OVERRIDDEN)

    @classmethod
    def resolve(cls, computed: float, explicit: Optional[float] = None) -> "PaymentAmount":
        # Differences below one paisa are float noise, not an operator edit
        if explicit is None or round(explicit - computed, 2) == 0:
            return cls.computed(computed)
        return cls.overridden(explicit)

    @property
    def is_overridden(self) -> bool:
        return self.kind is PaymentKind.OVERRIDDEN
