"""
Location packs: each location with its pool of civilian roles.
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class LocationPack:
    """A named location plus the roles civilians can be dealt there."""
    location: str
    roles: Tuple[str, ...]


LOCATIONS: List[LocationPack] = [
    LocationPack("Airplane", (
        "First Class Passenger", "Air Marshal", "Mechanic", "Economy Class Passenger",
        "Flight Attendant", "Co-Pilot", "Captain",
    )),
    LocationPack("Bank", (
        "Armored Car Driver", "Manager", "Consultant", "Customer",
        "Robber", "Security Guard", "Teller",
    )),
    LocationPack("Beach", (
        "Beach Waitress", "Kite Surfer", "Lifeguard", "Thief",
        "Beach Goer", "Beach Photographer", "Ice Cream Truck Driver",
    )),
    LocationPack("Casino", (
        "Bartender", "Head Security Guard", "Bouncer", "Manager",
        "Hustler", "Dealer", "Gambler",
    )),
    LocationPack("Cathedral", (
        "Priest", "Beggar", "Sinner", "Parishioner",
        "Tourist", "Sponsor", "Choir Singer",
    )),
    LocationPack("Hospital", (
        "Nurse", "Doctor", "Anesthesiologist", "Intern",
        "Patient", "Therapist", "Surgeon",
    )),
    LocationPack("Hotel", (
        "Doorman", "Security Guard", "Manager", "Housekeeper",
        "Customer", "Bartender", "Bellman",
    )),
    LocationPack("Movie Studio", (
        "Stunt Man", "Sound Engineer", "Camera Man", "Director",
        "Costume Artist", "Actor", "Producer",
    )),
    LocationPack("Passenger Train", (
        "Mechanic", "Border Patrol", "Train Attendant", "Passenger",
        "Restaurant Chef", "Engineer", "Stoker",
    )),
    LocationPack("Pirate Ship", (
        "Cook", "Sailor", "Slave", "Cannoneer",
        "Bound Prisoner", "Cabin Boy", "Brave Captain",
    )),
    LocationPack("Polar Station", (
        "Medic", "Geologist", "Expedition Leader", "Biologist",
        "Radioman", "Hydrologist", "Meteorologist",
    )),
    LocationPack("Restaurant", (
        "Musician", "Customer", "Bouncer", "Hostess",
        "Head Chef", "Food Critic", "Waiter",
    )),
    LocationPack("School", (
        "Gym Teacher", "Student", "Principal", "Security Guard",
        "Janitor", "Lunch Lady", "Maintenance Man",
    )),
    LocationPack("Space Station", (
        "Engineer", "Alien", "Space Tourist", "Pilot",
        "Commander", "Scientist", "Doctor",
    )),
    LocationPack("Submarine", (
        "Cook", "Commander", "Sonar Technician", "Electronics Technician",
        "Sailor", "Radioman", "Navigator",
    )),
    LocationPack("Supermarket", (
        "Customer", "Cashier", "Butcher", "Janitor",
        "Security Guard", "Food Sample Demonstrator", "Shelf Stocker",
    )),
]


def all_location_names() -> List[str]:
    """Names of every location a spy may guess from."""
    return [pack.location for pack in LOCATIONS]


def get_location(name: str) -> Optional[LocationPack]:
    """Look up a pack by name, ignoring case and surrounding whitespace."""
    wanted = name.strip().lower()
    for pack in LOCATIONS:
        if pack.location.lower() == wanted:
            return pack
    return None


def pick_random_location(rng: random.Random, min_roles: int = 0) -> LocationPack:
    """
    Pick a pack uniformly among those with at least `min_roles` roles.

    Raises:
        ValueError: If no pack has enough roles
    """
    candidates = [pack for pack in LOCATIONS if len(pack.roles) >= min_roles]
    if not candidates:
        raise ValueError(f"No location has at least {min_roles} roles")
    return rng.choice(candidates)
