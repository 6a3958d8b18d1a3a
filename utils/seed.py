import logging

from models import db
from models.admin_user import AdminUser

logger = logging.getLogger(__name__)

DEMO_SERVICES = [
    {
        "title": "Harmonização Facial",
        "description": "Rejuvenescimento e equilíbrio dos traços faciais com ácido hialurônico e toxina botulínica.",
        "price": "2500.00",
        "duration_min": 60,
    },
    {
        "title": "Lentes de Contato Dental",
        "description": "Facetas de porcelana ultrafinas para um sorriso perfeito e alinhado.",
        "price": "12000.00",
        "duration_min": 120,
    },
    {
        "title": "Clareamento a Laser",
        "description": "Tecnologia avançada para dentes até 3 tons mais brancos em sessão única.",
        "price": "800.00",
        "duration_min": 60,
    },
    {
        "title": "Invisalign (Alinhadores)",
        "description": "Ortodontia invisível e confortável para alinhar seu sorriso.",
        "price": "15000.00",
        "duration_min": 45,
    },
    {
        "title": "Implante Unitário Premium",
        "description": "Reabilitação com implantes suíços de carga imediata.",
        "price": "3500.00",
        "duration_min": 90,
    },
]

DEMO_PROFESSIONALS = [
    {
        "name": "Dr. Roberto Silva",
        "specialty": "Implantodontia e Estética",
        "photo_url": "https://images.unsplash.com/photo-1622253692010-333f2da6031d?auto=format&fit=crop&q=80&w=400",
        "bio": "Referência em reabilitação oral com mais de 15 anos de experiência.",
    },
    {
        "name": "Dra. Ana Costa",
        "specialty": "Harmonização Orofacial",
        "photo_url": "https://images.unsplash.com/photo-1559839734-2b71ea197ec2?auto=format&fit=crop&q=80&w=400",
        "bio": "Especialista em realçar a beleza natural através da harmonização.",
    },
    {
        "name": "Dr. Lucas Mendes",
        "specialty": "Ortodontia Digital",
        "photo_url": "https://images.unsplash.com/photo-1612349317150-e413f6a5b16d?auto=format&fit=crop&q=80&w=400",
        "bio": "Certificado Invisalign Doctor Provider.",
    },
]


def seed_demo_catalog(orchestrator) -> int:
    """Fill an empty catalog with the launch services and professionals. Idempotent."""
    created = 0
    if not orchestrator.services.list():
        for fields in DEMO_SERVICES:
            orchestrator.services.create(dict(fields))
            created += 1
    if not orchestrator.professionals.list():
        for fields in DEMO_PROFESSIONALS:
            orchestrator.professionals.create(dict(fields))
            created += 1
    if created:
        logger.info("seeded %d catalog records", created)
    return created


def ensure_admin(email: str, password: str, full_name=None):
    """Create the admin if missing, or reset its password. Returns the AdminUser."""
    email = (email or "").strip().lower()
    if "@" not in email:
        raise ValueError("A valid email is required")

    admin = AdminUser.query.filter_by(email=email).first()
    if admin is None:
        admin = AdminUser(email=email, full_name=full_name)
        admin.set_password(password)
        db.session.add(admin)
    else:
        admin.set_password(password)
        admin.is_active = True
    db.session.commit()
    return admin
