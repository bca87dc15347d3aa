# scripts/setup/init_db.py
"""
Initialize database: creates all tables and, optionally, seeds parking lots
and a staff account.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
       python scripts/setup/init_db.py --seed-lot "North Garage:120" --staff S-100:5550009:changeme
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import datetime

from parkwatch.database import SessionLocal, create_tables, engine
from parkwatch.config import settings
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.staff import Staff
from parkwatch.models.user import User
from parkwatch.services.auth_service import hash_password
from sqlalchemy import inspect, text


def seed_lots(db, entries):
    for entry in entries:
        name, _, spaces = entry.partition(":")
        if db.query(ParkingLot).filter(ParkingLot.lot_name == name).first():
            print(f"   • lot '{name}' already exists")
            continue
        db.add(ParkingLot(lot_name=name, total_spaces=int(spaces or 0)))
        print(f"   ✓ lot '{name}' ({spaces or 0} spaces)")
    db.commit()


def seed_staff(db, entry, lot_id):
    staff_id, phone, password = entry.split(":", 2)
    if db.query(Staff).filter(Staff.staff_id == staff_id).first():
        print(f"   • staff {staff_id} already exists")
        return
    user = User(name=f"Staff {staff_id}", phone=phone, password_hash=hash_password(password),
                role="admin", user_type="resident", unit_number="OFFICE", created_at=datetime.utcnow())
    db.add(user)
    db.flush()
    db.add(Staff(staff_id=staff_id, user_id=user.id, lot_id=lot_id))
    db.commit()
    print(f"   ✓ staff {staff_id} (phone {phone}) → lot {lot_id}")


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed reference data")
    parser.add_argument("--seed-lot", action="append", default=[], metavar="NAME:SPACES")
    parser.add_argument("--staff", metavar="STAFF_ID:PHONE:PASSWORD")
    parser.add_argument("--staff-lot", type=int, default=1)
    args = parser.parse_args()

    print("🗄️  ParkWatch DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ All tables created")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed_lot or args.staff:
        print("\n🌱 Seeding...")
        db = SessionLocal()
        try:
            seed_lots(db, args.seed_lot)
            if args.staff:
                seed_staff(db, args.staff, args.staff_lot)
        finally:
            db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn parkwatch.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
