#!/usr/bin/env python3
"""
Script to create a demo salon with catalog and default business hours
Usage: python -m app.scripts.seed_salon [slug]
"""
import sys
from typing import Optional
from sqlalchemy.orm import Session

from app.config.database import SessionLocal, create_tables
from app.models.salon import Salon
from app.models.service import Service, ServiceCategory
from app.services.tenant.tenant_service import TenantService

DEMO_CATALOG = {
    "Hair": [
        {"name": "Women's Cut", "duration_minutes": 60, "price_cents": 8500},
        {"name": "Men's Cut", "duration_minutes": 30, "price_cents": 4500},
        {"name": "Full Colour", "duration_minutes": 120, "price_cents": 18000},
    ],
    "Nails": [
        {"name": "Manicure", "duration_minutes": 45, "price_cents": 5000},
        {"name": "Pedicure", "duration_minutes": 60, "price_cents": 6500},
    ],
}


def seed_salon(db: Session, slug: str = "demo-salon", time_zone: str = "Australia/Sydney",
               capacity: Optional[int] = 2) -> Salon:
    """Create the demo salon if it does not exist yet"""
    salon = db.query(Salon).filter(Salon.slug == slug).first()
    if salon:
        print(f"ℹ️  Salon '{slug}' already exists (id={salon.id})")
        return salon

    salon = Salon(
        name="Demo Salon",
        slug=slug,
        time_zone=time_zone,
        capacity=capacity,
        is_active=True
    )
    db.add(salon)
    db.flush()

    for order, (category_name, services) in enumerate(DEMO_CATALOG.items()):
        category = ServiceCategory(salon_id=salon.id, name=category_name, display_order=order)
        db.add(category)
        db.flush()
        for service in services:
            db.add(Service(salon_id=salon.id, category_id=category.id, **service))

    db.commit()
    TenantService.set_default_business_hours(db, salon.id)

    print(f"✅ Created salon '{slug}' (id={salon.id}) in {time_zone}")
    return salon


if __name__ == "__main__":
    create_tables()
    db = SessionLocal()
    try:
        seed_salon(db, *sys.argv[1:2])
    except Exception as e:
        db.rollback()
        print("❌ Error seeding salon:", e)
        sys.exit(1)
    finally:
        db.close()
