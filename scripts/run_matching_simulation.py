import logging
import os
import random
from datetime import timedelta

import pandas as pd

from dispatch.policy import matching_policy_from_env
from dispatch.system import RideSharingSystem
from scripts.generate_mock_drivers import generate_mock_drivers

def load_drivers(system: RideSharingSystem, filepath="mock_drivers_100.csv") -> int:
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = os.path.join(base_dir, filepath)
    
    if not os.path.exists(absolute_path):
        generate_mock_drivers(absolute_path)
    
    df = pd.read_csv(absolute_path)
    for _, row in df.iterrows():
        driver_id = system.register_driver(float(row["lat"]), float(row["lon"]))
        if not int(row["available"]):
            system.set_driver_availability(driver_id, False)
    return len(df)

def run_simulation(num_requests=40):
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING"))
    print("=== STARTING GEOHASH MATCHING SIMULATION ===")
    
    # 1. Configure System
    system = RideSharingSystem(matching_policy_from_env())
    
    # 2. Load Data
    num_drivers = load_drivers(system)
    print(f"Loaded {num_drivers} Drivers.\n")
    
    # 3. Fire ride requests around the same city center
    base_lat = -17.824858
    base_lon = 31.053028
    
    matched = 0
    for _ in range(num_requests):
        lat = base_lat + (random.random() - 0.5) * 0.1
        lon = base_lon + (random.random() - 0.5) * 0.1
        result = system.request_ride(lat, lon)
        
        if result.matched:
            matched += 1
            print(f"[SUCCESS] Request {result.request_id} -> Driver {result.driver_id} ({result.distance_km:.2f} km)")
        else:
            print(f"[PENDING] Request {result.request_id} -> No available drivers.")
    
    # 4. Pretend the clock moved past the timeout and sweep
    stats = system.snapshot_stats()
    expired = system.process_expired_requests(
        now=stats.now + timedelta(seconds=system.policy.request_timeout_seconds + 1)
    )
    
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Requests Matched: {matched} / {num_requests}")
    print(f"Requests Expired: {len(expired)}")
    
    final = system.snapshot_stats()
    print(f"Total Drivers: {final.total_drivers} | Available: {final.available_drivers}")
    print(final.available_drivers_frame().head(10).to_string(index=False))

if __name__ == "__main__":
    run_simulation()
