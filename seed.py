# seed.py
"""Create the demo admin and demo catalog entries. Safe to run repeatedly."""
import logging

from online_forms.database import SessionLocal, init_db
from online_forms.models.application import Application
from online_forms.models.form_field import FormField
from online_forms.models.user import User
from online_forms.utils.hash import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@onlineforms.com"
ADMIN_PASSWORD = "admin123"

DEMO_APPLICATIONS = [
    {
        "title": "Passport Application",
        "description": "Apply for a new passport or renew your existing passport online. Required documents "
                       "include proof of identity, address proof, and birth certificate.",
        "category": "Government",
        "image_url": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=400",
        "redirect_url": "https://passportindia.gov.in",
        "processing_fee": 99.0,
        "estimated_time": 30,
        "priority": 8,
        "tags": ["passport", "government", "identity"],
        "requirements": "Valid ID proof, Address proof, Birth certificate, Photographs",
        "fields": [
            {"label": "Full Name", "field_type": "text", "is_required": True,
             "placeholder": "Enter your full name as per documents"},
            {"label": "Date of Birth", "field_type": "date", "is_required": True},
            {"label": "Email Address", "field_type": "email", "is_required": True},
            {"label": "Phone Number", "field_type": "phone", "is_required": True},
            {"label": "Address", "field_type": "textarea", "is_required": True},
        ],
    },
    {
        "title": "Driving License Application",
        "description": "Apply for a new driving license or renew your existing license. Includes learner's "
                       "license and permanent license applications.",
        "category": "Government",
        "image_url": "https://images.unsplash.com/photo-1544620347-c4fd4a3d5957?w=400",
        "redirect_url": "https://parivahan.gov.in",
        "processing_fee": 149.0,
        "estimated_time": 25,
        "priority": 7,
        "tags": ["driving", "license", "transport"],
        "requirements": "Age proof, Address proof, Medical certificate, Photographs",
        "fields": [
            {"label": "Full Name", "field_type": "text", "is_required": True},
            {"label": "License Type", "field_type": "dropdown", "is_required": True,
             "options": ["Learner License", "Permanent License", "Renewal"]},
            {"label": "Vehicle Category", "field_type": "multiSelect", "is_required": True,
             "options": ["Two Wheeler", "Four Wheeler", "Commercial Vehicle"]},
        ],
    },
    {
        "title": "College Admission Form",
        "description": "Submit your college admission application with all required documents and information. "
                       "Available for undergraduate and postgraduate programs.",
        "category": "Education",
        "image_url": "https://images.unsplash.com/photo-1523050854058-8df90110c9f1?w=400",
        "redirect_url": "https://admissions.university.edu",
        "processing_fee": 199.0,
        "estimated_time": 45,
        "priority": 6,
        "tags": ["education", "college", "admission"],
        "requirements": "10th & 12th certificates, Entrance exam scores, ID proof, Photographs",
        "fields": [
            {"label": "Full Name", "field_type": "text", "is_required": True},
            {"label": "Program", "field_type": "radio", "is_required": True,
             "options": ["Undergraduate", "Postgraduate"]},
            {"label": "Marks Percentage", "field_type": "number", "is_required": True,
             "min_value": 0, "max_value": 100},
        ],
    },
]


def seed_admin(db) -> User:
    admin = db.query(User).filter(User.email == ADMIN_EMAIL).first()
    if admin:
        logger.info(f"ℹ️ Admin already exists: {ADMIN_EMAIL}")
        return admin

    admin = User(
        name="System Administrator",
        email=ADMIN_EMAIL,
        hashed_password=hash_password(ADMIN_PASSWORD),
        role="admin",
        is_active=True,
        email_verified=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"✅ Admin created: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
    return admin


def seed_applications(db, admin: User):
    for entry in DEMO_APPLICATIONS:
        if db.query(Application).filter(Application.title == entry["title"]).first():
            logger.info(f"ℹ️ Application already exists: {entry['title']}")
            continue

        data = {k: v for k, v in entry.items() if k != "fields"}
        application = Application(**data, created_by=admin.id)
        application.form_fields = [
            FormField(order=index + 1, **field) for index, field in enumerate(entry["fields"])
        ]
        db.add(application)
        db.commit()
        logger.info(f"✅ Application created: {entry['title']}")


if __name__ == "__main__":
    init_db()
    db = SessionLocal()
    try:
        seed_applications(db, seed_admin(db))
    finally:
        db.close()
