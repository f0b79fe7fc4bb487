"""
Seed script to populate the database with initial data.
Run from backend/: python seed.py

The first admin's credentials come from SEED_ADMIN_USERNAME and
SEED_ADMIN_PASSWORD.
"""
import os
import sys
sys.path.insert(0, os.path.dirname(__file__))

from portal import create_app, db
from portal.models import Admin, Gift, SiteSettings, Terms

GIFTS = [
    # (name, description, monthly_quota)
    ("Welcome Box", "Starter box sent to new members", 100),
    ("Member T-Shirt", "Limited member t-shirt", 50),
    ("E-Book Bundle", "Digital guides, delivered by email", None),
]

DEFAULT_TERMS = "Membership lasts 30 days from payment approval. Each member may claim one gift."


def seed():
    app = create_app()
    with app.app_context():
        # Seed gifts
        for name, description, quota in GIFTS:
            if Gift.query.filter_by(name=name).first():
                print(f"  Gift '{name}' already exists, skipping.")
                continue
            db.session.add(Gift(name=name, description=description, monthly_quota=quota))
            print(f"  Added gift '{name}' (monthly quota: {quota or 'unlimited'})")
        db.session.commit()
        print(f"Gifts seeded: {Gift.query.count()} total.\n")

        # Seed singletons
        if SiteSettings.get() is None:
            SiteSettings.upsert({'membership_price': 499})
            print("  Created default site settings")
        if Terms.get() is None:
            Terms.upsert({'content': DEFAULT_TERMS})
            print("  Created default terms")
        db.session.commit()

        # Seed admin
        username = os.getenv('SEED_ADMIN_USERNAME', 'admin')
        password = os.getenv('SEED_ADMIN_PASSWORD')
        admin = Admin.query.filter_by(username=username).first()
        if admin:
            print(f"  Admin '{username}' already exists (id={admin.id}), skipping.")
        elif not password:
            print("  SEED_ADMIN_PASSWORD not set, skipping admin creation.")
        else:
            admin = Admin(username=username)
            admin.set_password(password)
            db.session.add(admin)
            db.session.commit()
            print(f"  Created admin '{username}' (id={admin.id})")

        print("\nDone.")


if __name__ == "__main__":
    seed()
