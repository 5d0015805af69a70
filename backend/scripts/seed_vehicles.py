"""Seed the starter vehicle catalog."""

from __future__ import annotations

import asyncio

from sharenest.db.session import get_sessionmaker
from sharenest.schemas.vehicle import VehicleCreate
from sharenest.services import vehicle_service

CATALOG: list[dict[str, object]] = [
    {
        "id": "sakura-2023",
        "title": "Nissan SAKURA (EV, city driving)",
        "brand": "Nissan",
        "model": "SAKURA",
        "year": 2023,
        "seats": 4,
        "powertrain": "EV",
        "range_km": 100,
        "daily_rate": 5000,
        "hourly_rate": 700,
        "per_km_rate": 0,
        "deposit_amount": 30000,
        "pickup_points": ["Kyoto Station", "Shijo Kawaramachi"],
        "rules": [
            "Return with at least 60% charge",
            "No smoking",
            "Pets on request",
            "Fast charging billed at cost",
        ],
        "photos": ["/images/vehicles/sakura.jpg"],
    },
    {
        "id": "model3p-2022",
        "title": "Tesla Model 3 Performance 2022 (long drives)",
        "brand": "Tesla",
        "model": "Model 3 Performance",
        "year": 2022,
        "seats": 5,
        "powertrain": "EV",
        "range_km": 400,
        "daily_rate": 20000,
        "hourly_rate": 0,
        "per_km_rate": 25,
        "deposit_amount": 50000,
        "pickup_points": ["Kyoto Station", "Osaka Umeda"],
        "rules": ["Follow Supercharger etiquette", "No smoking", "Mind the curbs"],
        "photos": ["/images/vehicles/model3.jpg"],
    },
    {
        "id": "eqb350-2022",
        "title": "Mercedes EQB350 2022 (family and groups)",
        "brand": "Mercedes-Benz",
        "model": "EQB 350",
        "year": 2022,
        "seats": 7,
        "powertrain": "EV",
        "range_km": 350,
        "daily_rate": 23000,
        "hourly_rate": 0,
        "per_km_rate": 25,
        "deposit_amount": 50000,
        "pickup_points": ["Kyoto Station", "Osaka Umeda"],
        "rules": [
            "Child seats are a paid option",
            "No smoking",
            "Return with at least 60% charge",
        ],
        "photos": ["/images/vehicles/eqb.jpg"],
    },
    {
        "id": "alphard-2024",
        "title": "TOYOTA ALPHARD 2024 (luxury)",
        "brand": "TOYOTA",
        "model": "ALPHARD",
        "year": 2024,
        "seats": 7,
        "powertrain": "Hybrid",
        "range_km": None,
        "daily_rate": 26000,
        "hourly_rate": 0,
        "per_km_rate": 25,
        "deposit_amount": 50000,
        "pickup_points": ["Kyoto Station", "Osaka Umeda"],
        "rules": [
            "No smoking",
            "Declare large luggage in advance",
            "Cleaning and late return fees apply",
        ],
        "photos": ["/images/vehicles/alphard.jpg"],
    },
]


async def seed_vehicles() -> None:
    sessionmaker = get_sessionmaker()
    created = 0
    async with sessionmaker() as session:
        for entry in CATALOG:
            if await vehicle_service.get_vehicle(session, str(entry["id"])) is not None:
                continue
            await vehicle_service.create_vehicle(session, VehicleCreate(**entry))
            created += 1
    print(f"Seeded {created} vehicles ({len(CATALOG) - created} already present).")


if __name__ == "__main__":
    asyncio.run(seed_vehicles())
