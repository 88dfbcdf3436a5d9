"""
ReviewDesk Database Seeder

Creates demo accounts for each role:
- an admin (profile role 'admin')
- a reviewer (Priya, slug 'priya-sharma') with two experiences
- a user (Sam) who shared a resume with Priya and received a review
"""

import sys
sys.path.insert(0, ".")

from reviewdesk.db.session import SessionLocal, engine
from reviewdesk.db.base import Base
from reviewdesk.models import Experience, Follow, Profile, Resume, Review, Reviewer, User
from reviewdesk.core.security import get_password_hash
from reviewdesk.services.social import normalize_social_link

DEMO_PASSWORD = "Review#2024"


def seed_database():
    """Seed the database with demo data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing_admin = db.query(User).filter(User.email == "admin@reviewdesk.dev").first()
        if existing_admin:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Admin
        admin = User(
            email="admin@reviewdesk.dev",
            hashed_password=get_password_hash(DEMO_PASSWORD),
            full_name="Dana Admin",
        )
        db.add(admin)

        # 2. Reviewer
        priya = User(
            email="priya@example.com",
            hashed_password=get_password_hash(DEMO_PASSWORD),
            full_name="Priya Sharma",
            user_metadata={"full_name": "Priya Sharma"},
        )
        db.add(priya)

        # 3. User
        sam = User(
            email="sam@example.com",
            hashed_password=get_password_hash(DEMO_PASSWORD),
            full_name="Sam Lee",
        )
        db.add(sam)
        db.flush()  # Get IDs

        db.add_all(
            [
                Profile(id=admin.id, role="admin", onboarded=True),
                Profile(id=priya.id, role="reviewer", onboarded=True),
                Profile(
                    id=sam.id,
                    role="user",
                    onboarded=True,
                    employment_status="student",
                    student_university="University of Toronto",
                    desired_job_title="Software Engineer",
                    desired_location="Toronto, Canada",
                ),
            ]
        )

        social_link = "https://www.linkedin.com/in/priya-sharma/"
        reviewer = Reviewer(
            user_id=priya.id,
            display_name="Priya Sharma",
            slug="priya-sharma",
            company="Shopify",
            experience_years=8,
            headline="Software expert helping new grads land their first role",
            country="Canada",
            expertise=["Software", "Data"],
            social_link=social_link,
            social_link_key=normalize_social_link(social_link),
        )
        db.add(reviewer)
        db.flush()

        db.add_all(
            [
                Experience(
                    reviewer_id=reviewer.id,
                    title="Staff Engineer",
                    company="Shopify",
                    employment_type="Full-time",
                    location="Toronto",
                    location_type="Hybrid",
                    start_date="2021-03-01",
                    currently_working=True,
                ),
                Experience(
                    reviewer_id=reviewer.id,
                    title="Software Engineer",
                    company="Wealthsimple",
                    employment_type="Full-time",
                    location="Toronto",
                    location_type="On-site",
                    start_date="2016-06-01",
                    end_date="2021-02-28",
                ),
            ]
        )

        resume = Resume(
            user_id=sam.id,
            file_url="https://storage.example.com/resumes/sam-lee.pdf",
            status="Completed",
            score=7,
            notes="Strong projects; quantify impact in the internship bullets.",
            reviewer_slug=reviewer.slug,
        )
        db.add(resume)
        db.flush()

        db.add(
            Review(
                reviewer_id=priya.id,
                resume_id=resume.id,
                score=7,
                feedback=resume.notes,
            )
        )
        db.add(Follow(follower_id=sam.id, reviewer_id=priya.id))

        # Commit all changes
        db.commit()

        print("✅ Database seeded successfully!")
        print(f"\n📋 Created Users (password: {DEMO_PASSWORD}):")
        print("   - admin@reviewdesk.dev [admin]")
        print("   - priya@example.com [reviewer, /r/priya-sharma]")
        print("   - sam@example.com [user, 1 reviewed resume]")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
