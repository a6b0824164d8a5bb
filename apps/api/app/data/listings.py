"""Bundled sample catalog served when the discovery provider is unavailable."""
from __future__ import annotations

from typing import Any


def _location(area_id: int, area_external_id: str, area: str, slug: str) -> list[dict[str, Any]]:
    return [
        {"id": 2, "level": 1, "externalID": "6020", "name": "Dubai", "slug": "dubai"},
        {"id": area_id, "level": 2, "externalID": area_external_id, "name": area, "slug": slug},
    ]


def _photo(photo_id: int, seed: str) -> dict[str, Any]:
    return {"id": photo_id, "url": f"https://images.unsplash.com/{seed}?w=800&h=600&fit=crop"}


SAMPLE_PROPERTIES: list[dict[str, Any]] = [
    {
        "id": 1,
        "externalID": "mock-1",
        "title": "Luxury 2BR Apartment in Dubai Marina",
        "description": "Beautiful waterfront apartment with stunning views",
        "price": 85_000,
        "rentFrequency": "yearly",
        "rooms": 2,
        "baths": 2,
        "area": 1200,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "apartment",
        "location": _location(1, "5002", "Dubai Marina", "dubai-marina"),
        "photos": [_photo(1, "photo-1545324418-cc1a3fa10c00")],
        "coverPhoto": _photo(1, "photo-1545324418-cc1a3fa10c00"),
        "isVerified": True,
        "updatedAt": 1_717_200_000,
    },
    {
        "id": 2,
        "externalID": "mock-2",
        "title": "Modern 1BR Studio in Business Bay",
        "description": "Contemporary studio apartment in prime location",
        "price": 65_000,
        "rentFrequency": "yearly",
        "rooms": 1,
        "baths": 1,
        "area": 800,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "apartment",
        "location": _location(3, "5003", "Business Bay", "business-bay"),
        "photos": [_photo(2, "photo-1502672260266-1c1ef2d93688")],
        "coverPhoto": _photo(2, "photo-1502672260266-1c1ef2d93688"),
        "isVerified": True,
        "updatedAt": 1_717_100_000,
    },
    {
        "id": 3,
        "externalID": "mock-3",
        "title": "Spacious 3BR Villa in Jumeirah",
        "description": "Family villa with private garden and pool",
        "price": 180_000,
        "rentFrequency": "yearly",
        "rooms": 3,
        "baths": 3,
        "area": 2500,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "villa",
        "location": _location(4, "5004", "Jumeirah", "jumeirah"),
        "photos": [_photo(3, "photo-1564013799919-ab600027ffc6")],
        "coverPhoto": _photo(3, "photo-1564013799919-ab600027ffc6"),
        "isVerified": True,
        "updatedAt": 1_717_000_000,
    },
    {
        "id": 4,
        "externalID": "mock-4",
        "title": "Penthouse Apartment in Downtown",
        "description": "Luxury penthouse with panoramic city views",
        "price": 250_000,
        "rentFrequency": "yearly",
        "rooms": 4,
        "baths": 4,
        "area": 3000,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "penthouse",
        "location": _location(5, "5005", "Downtown Dubai", "downtown-dubai"),
        "photos": [_photo(4, "photo-1512917774080-9991f1c4c750")],
        "coverPhoto": _photo(4, "photo-1512917774080-9991f1c4c750"),
        "isVerified": True,
        "updatedAt": 1_716_900_000,
    },
    {
        "id": 5,
        "externalID": "mock-5",
        "title": "Cozy 1BR Apartment in JLT",
        "description": "Affordable apartment in Jumeirah Lake Towers",
        "price": 55_000,
        "rentFrequency": "yearly",
        "rooms": 1,
        "baths": 1,
        "area": 700,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "apartment",
        "location": _location(6, "5006", "Jumeirah Lake Towers", "jlt"),
        "photos": [_photo(5, "photo-1522708323590-d24dbb6b0267")],
        "coverPhoto": _photo(5, "photo-1522708323590-d24dbb6b0267"),
        "isVerified": True,
        "updatedAt": 1_716_800_000,
    },
    {
        "id": 6,
        "externalID": "mock-6",
        "title": "Luxury 2BR in Palm Jumeirah",
        "description": "Beachfront apartment with private beach access",
        "price": 120_000,
        "rentFrequency": "yearly",
        "rooms": 2,
        "baths": 2,
        "area": 1500,
        "areaUnit": "sqft",
        "purpose": "for-rent",
        "propertyType": "apartment",
        "location": _location(7, "5007", "Palm Jumeirah", "palm-jumeirah"),
        "photos": [_photo(6, "photo-1613490493576-7fde63acd811")],
        "coverPhoto": _photo(6, "photo-1613490493576-7fde63acd811"),
        "isVerified": True,
        "updatedAt": 1_716_700_000,
    },
]

SAMPLE_LOCATIONS: list[dict[str, Any]] = [
    {"id": 1, "name": "Dubai Marina", "externalID": "5002"},
    {"id": 2, "name": "Business Bay", "externalID": "5003"},
    {"id": 3, "name": "Downtown Dubai", "externalID": "5005"},
    {"id": 4, "name": "Jumeirah", "externalID": "5004"},
    {"id": 5, "name": "Palm Jumeirah", "externalID": "5007"},
]

# Sale listings are derived from the rental catalog.
SALE_PRICE_MULTIPLIER = 15
