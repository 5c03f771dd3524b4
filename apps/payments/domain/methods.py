from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping


class PaymentMethod(StrEnum):
    CASH = "cash"
    CBE = "cbe"
    TELEBIRR = "telebirr"
    MPESA = "mpesa"
    ABISNYA = "abisnya"
    ENAT = "enat"
    DASHEN = "dashen"
    OTHER = "other"


@dataclass(frozen=True)
class PaymentMethodInfo:
    code: str
    name: str
    account: str | None
    instructions: str | None

    def as_dict(self) -> dict:
        data = asdict(self)
        data.pop("code")
        return data


PAYMENT_METHODS: Mapping[str, PaymentMethodInfo] = MappingProxyType(
    {
        PaymentMethod.CASH: PaymentMethodInfo(
            code=PaymentMethod.CASH,
            name="Cash on Delivery",
            account=None,
            instructions=None,
        ),
        PaymentMethod.CBE: PaymentMethodInfo(
            code=PaymentMethod.CBE,
            name="Commercial Bank of Ethiopia",
            account="1000668411901",
            instructions="Send payment to CBE account 1000668411901",
        ),
        PaymentMethod.TELEBIRR: PaymentMethodInfo(
            code=PaymentMethod.TELEBIRR,
            name="Telebirr",
            account="0969377085",
            instructions="Send payment to Telebirr 0969377085",
        ),
        PaymentMethod.MPESA: PaymentMethodInfo(
            code=PaymentMethod.MPESA,
            name="M-Pesa Safari",
            account="0706377085",
            instructions="Send payment to M-Pesa 0706377085",
        ),
        PaymentMethod.ABISNYA: PaymentMethodInfo(
            code=PaymentMethod.ABISNYA,
            name="Abisnya",
            account="Coming Soon",
            instructions="Coming Soon",
        ),
        PaymentMethod.ENAT: PaymentMethodInfo(
            code=PaymentMethod.ENAT,
            name="Enat Bank",
            account="Coming Soon",
            instructions="Coming Soon",
        ),
        PaymentMethod.DASHEN: PaymentMethodInfo(
            code=PaymentMethod.DASHEN,
            name="Dashen Bank",
            account="Coming Soon",
            instructions="Coming Soon",
        ),
        PaymentMethod.OTHER: PaymentMethodInfo(
            code=PaymentMethod.OTHER,
            name="Other",
            account="Contact for details",
            instructions="Contact us for payment details",
        ),
    }
)


def is_self_confirming(method: str) -> bool:
    """Recording any non-cash method marks the order paid; there is no gateway callback."""
    return method != PaymentMethod.CASH
