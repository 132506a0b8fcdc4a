from typing import Optional

from . import config


class Driver:
    def __init__(self, id: str, name: str, current_location: int, is_available: bool = True,
                 vehicle_type: str = config.DEFAULT_VEHICLE_TYPE,
                 rating: float = config.DEFAULT_DRIVER_RATING, completed_rides: int = 0):
        self.id = id
        self.name = name
        self.current_location = current_location
        self.is_available = is_available
        self.vehicle_type = vehicle_type
        self.rating = rating
        self.completed_rides = completed_rides

    def update_location(self, new_location: int):
        """Update driver's location"""
        self.current_location = new_location

    def complete_ride(self, dropoff_location: Optional[int] = None):
        """Finish the current ride, optionally at a new location"""
        if dropoff_location is not None:
            self.current_location = dropoff_location
        self.completed_rides += 1
        self.is_available = True

    def copy(self) -> 'Driver':
        return Driver(self.id, self.name, self.current_location, self.is_available,
                      self.vehicle_type, self.rating, self.completed_rides)

    def __eq__(self, other):
        if not isinstance(other, Driver):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        status = "available" if self.is_available else "busy"
        return f"Driver({self.id}, {self.name!r}, at={self.current_location}, {status})"

    @classmethod
    def from_dict(cls, data) -> 'Driver':
        """Build a driver from its serialized form"""
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            current_location=int(data.get('currentLocation', 0)),
            is_available=bool(data.get('isAvailable', True)),
            vehicle_type=data.get('vehicleType', config.DEFAULT_VEHICLE_TYPE),
            rating=float(data.get('rating', config.DEFAULT_DRIVER_RATING)),
            completed_rides=int(data.get('completedRides', 0))
        )

    def to_dict(self):
        """Convert driver data to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'currentLocation': self.current_location,
            'isAvailable': self.is_available,
            'vehicleType': self.vehicle_type,
            'rating': self.rating,
            'completedRides': self.completed_rides
        }
