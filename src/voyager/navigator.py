"""Driving directions deep links for external navigation apps."""

from typing import Optional
from urllib.parse import urlencode

from voyager.geo import Coordinate

def build_navigation_url(app: str, destination: Coordinate, name: Optional[str] = None) -> str:
    """Build a driving directions URL to destination for the given app.

    Args:
        app: "apple", "google" or "waze"
        destination: Where to navigate
        name: Optional destination label (used where the app supports one)

    Returns:
        An https URL the client can hand to the OS

    Raises:
        ValueError: For an unknown app
    """
    ll = f"{destination.lat},{destination.lon}"

    if app == "apple":
        params = {"daddr": ll, "dirflg": "d"}
        if name:
            params["q"] = name
        return f"https://maps.apple.com/?{urlencode(params)}"

    if app == "google":
        params = {"api": "1", "destination": ll, "travelmode": "driving"}
        return f"https://www.google.com/maps/dir/?{urlencode(params)}"

    if app == "waze":
        return f"https://waze.com/ul?{urlencode({'ll': ll, 'navigate': 'yes'})}"

    raise ValueError(f"Unknown navigation app: {app}")
