"""Insert sample dormitory rooms. Run: python -m scripts.seed_dormitories"""
from app.db.session import SessionLocal
from app.schemas.catalog import DormitoryIn
from app.services.catalog_service import save_dormitory

SAMPLE_DORMITORIES = [
    DormitoryIn(roomNumber="101", floor=1, capacity=4, isAvailable=True, buildingName="ifaboru"),
    DormitoryIn(roomNumber="102", floor=1, capacity=4, isAvailable=False, buildingName="ifaboru"),
    DormitoryIn(roomNumber="103", floor=1, capacity=4, isAvailable=True, buildingName="ifaboru"),
    DormitoryIn(roomNumber="201", floor=2, capacity=4, isAvailable=True, buildingName="buuraboru"),
    DormitoryIn(roomNumber="202", floor=2, capacity=4, isAvailable=False, buildingName="buuraboru"),
]


def main():
    db = SessionLocal()
    try:
        print("[seed_dormitories] seeding dormitory data")
        for body in SAMPLE_DORMITORIES:
            d = save_dormitory(db, body)
            print(f"[seed_dormitories] added dormitory {d.room_number}")
        print("[seed_dormitories] done")
    finally:
        db.close()


if __name__ == "__main__":
    main()
