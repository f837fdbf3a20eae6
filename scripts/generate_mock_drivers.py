import csv
import random

def generate_mock_drivers(filename="mock_drivers_100.csv", count=100):
    # Base coordinate roughly mapping to the center of Harare.
    base_lat = -17.824858
    base_lon = 31.053028
    
    with open(filename, mode='w', newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["lat", "lon", "available"])
        
        for i in range(count):
            # Scatter drivers randomly around the city center (roughly +/- 8km)
            lat = base_lat + (random.random() - 0.5) * 0.15
            lon = base_lon + (random.random() - 0.5) * 0.15
            
            # 80% chance of being available
            available = random.random() < 0.8
            
            writer.writerow([round(lat, 6), round(lon, 6), int(available)])
            
    print(f"Successfully generated {count} mock drivers into '{filename}'.")

if __name__ == "__main__":
    generate_mock_drivers()
