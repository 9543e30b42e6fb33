from quickflex_admin.database.models import (
    BackgroundCheck,
    BankingDetails,
    Driver,
    Insurance,
    Vehicle,
)

__all__ = [
    "BackgroundCheck",
    "BankingDetails",
    "Driver",
    "Insurance",
    "Vehicle",
]
