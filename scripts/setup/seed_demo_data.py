# scripts/setup/seed_demo_data.py
"""
Insert a demo tenant: one client, two parkings with levels and sensors,
one user with a grant on both parkings.
Usage: python scripts/setup/seed_demo_data.py [--sensors-per-floor 8]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import date
from parking_telemetry.database import SessionLocal, create_tables
from parking_telemetry.models import Client, Parking, Level, Sensor, User, Permission

CLIENT_ID = "demo-client"
USER_ID = "demo-user"

PARKINGS = [
    # parking_id, complex, alias, floors (number → alias)
    ("demo-central", "Downtown", "Central Garage", {-1: "Basement", 0: "Ground", 1: "Level 1"}),
    ("demo-harbour", "Waterfront", "Harbour Lot", {0: None}),
]


def seed(sensors_per_floor: int):
    create_tables()
    db = SessionLocal()
    try:
        if db.get(Client, CLIENT_ID):
            print(f"⚠️  Demo client '{CLIENT_ID}' already exists — nothing to do")
            return

        total_floors = sum(len(floors) for *_, floors in PARKINGS)
        db.add(Client(client_id=CLIENT_ID, client_alias="Demo Client", no_users=1,
                      no_complexes=len({p[1] for p in PARKINGS}), no_parkings=len(PARKINGS),
                      no_floors=total_floors, no_sensors=total_floors * sensors_per_floor))
        db.add(User(user_id=USER_ID, username="demo", administrator=True, client_id=CLIENT_ID))

        for parking_id, complex_name, alias, floors in PARKINGS:
            db.add(Parking(parking_id=parking_id, client_id=CLIENT_ID, complex=complex_name,
                           parking_alias=alias, installation_date=date.today(),
                           closing_schedule=["22:00"] * 7, no_levels=len(floors),
                           no_sensors=len(floors) * sensors_per_floor))
            for floor, floor_alias in floors.items():
                db.add(Level(parking_id=parking_id, floor=floor, floor_alias=floor_alias,
                             no_sensors=sensors_per_floor))
                for n in range(sensors_per_floor):
                    db.add(Sensor(sensor_id=f"{parking_id}-f{floor}-s{n:02d}", parking_id=parking_id,
                                  floor=floor, sensor_alias=f"{floor}-{n:02d}", column=n, row=0,
                                  type="ultrasonic"))
            db.add(Permission(user_id=USER_ID, parking_id=parking_id))

        db.commit()
        print(f"✅ Seeded {len(PARKINGS)} parkings, {total_floors} levels, "
              f"{total_floors * sensors_per_floor} sensors for user '{USER_ID}'")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo parkings and sensors")
    parser.add_argument("--sensors-per-floor", type=int, default=8)
    args = parser.parse_args()
    seed(args.sensors_per_floor)
