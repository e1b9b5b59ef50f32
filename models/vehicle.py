"""Vehicle and VehicleShare classes."""

from datetime import datetime
from typing import Optional

# Vehicles owned by this user id are visible to everyone
PUBLIC_OWNER_ID = 0


class Vehicle:
    """A vehicle that reminders are attached to."""

    def __init__(
        self,
        make: str,
        model: str,
        year: int,
        license_plate: str,
        vin: Optional[str] = None,
        color: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: int = PUBLIC_OWNER_ID,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id or PUBLIC_OWNER_ID
        self.make = make
        self.model = model
        self.year = year
        self.license_plate = license_plate
        self.vin = vin
        self.color = color
        self.notes = notes
        self.created_at = created_at

    @property
    def name(self) -> str:
        """Human-readable vehicle name, e.g. 'Volvo XC60 (ABC 123)'."""
        return f"{self.make} {self.model} ({self.license_plate})"

    @property
    def is_public(self) -> bool:
        return self.user_id == PUBLIC_OWNER_ID

    def is_owned_by(self, user_id: int) -> bool:
        """Owners may delete and share; public vehicles are owned by everyone."""
        return self.is_public or self.user_id == user_id


class VehicleShare:
    """Grants a user access to a vehicle they do not own."""

    def __init__(
        self,
        vehicle_id: int,
        user_id: int,
        id: Optional[int] = None,
        shared_at: Optional[datetime] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.user_id = user_id
        self.shared_at = shared_at
