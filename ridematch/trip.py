from datetime import datetime
from typing import Optional


class RideRequest:
    """A passenger's request to travel from pickup to destination"""

    def __init__(self, request_id: str, pickup_location: int, destination_location: int,
                 passenger_id: str, created_at: Optional[datetime] = None):
        self.request_id = request_id
        self.pickup_location = pickup_location
        self.destination_location = destination_location
        self.passenger_id = passenger_id
        self.created_at = created_at if created_at is not None else datetime.now()

    def __repr__(self):
        return f"RideRequest({self.request_id}, {self.pickup_location} -> {self.destination_location})"

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'requestId': self.request_id,
            'pickupLocation': self.pickup_location,
            'destinationLocation': self.destination_location,
            'passengerId': self.passenger_id,
            'createdAt': self.created_at.isoformat()
        }
