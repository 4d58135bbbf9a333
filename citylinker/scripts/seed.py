"""
Seed categories, an admin account and demo businesses (Lubumbashi). Idempotent:
rows that already exist (by category name or email) are left alone.

  python -m citylinker.scripts.seed [--admin-password PASSWORD] [--no-demo]
"""
import argparse
import logging
import sys
from typing import Any

from sqlalchemy.orm import Session

from citylinker.core.database import SessionLocal
from citylinker.core.security import hash_password
from citylinker.models import Publication, PublicationStatus, PublicationType, UserRole
from citylinker.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@citylinker.cd"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEMO_BUSINESS_PASSWORD = "business123"

CATEGORIES: list[dict[str, str]] = [
    {"name": "Restauration", "icon": "utensils", "description": "Restaurants, Malewa, Fast-food"},
    {"name": "Santé", "icon": "stethoscope", "description": "Cliniques, Pharmacies, Médecins"},
    {"name": "Éducation", "icon": "graduation", "description": "Écoles, Universités, Formations"},
    {"name": "Automobile", "icon": "car", "description": "Garages, Vente pièces, Lavage"},
    {"name": "Construction", "icon": "hammer", "description": "BTP, Quincailleries, Artisans"},
    {"name": "Mode & Beauté", "icon": "shirt", "description": "Boutiques, Salons de coiffure"},
    {"name": "Immobilier", "icon": "home", "description": "Agences, Ventes parcelles, Locations"},
    {"name": "Services Pro", "icon": "briefcase", "description": "Consulting, Bureaux, Impression"},
    {"name": "Voyage & Hôtels", "icon": "plane", "description": "Agences de voyage, Hôtels"},
    {"name": "Technologie", "icon": "sparkles", "description": "Vente téléphones, Réparation, Cyber"},
]

# Each business: user fields, its category name and its publications.
DEMO_BUSINESSES: list[dict[str, Any]] = [
    {
        "user": {
            "email": "contact@techlushi.cd",
            "first_name": "Michel",
            "last_name": "Kasongo",
            "business_name": "Lushi Tech Services",
            "business_description": "Maintenance informatique et vente de matériel au cœur de Lubumbashi.",
            "business_address": "Av. Kasa-Vubu, Centre-ville, Lubumbashi",
            "business_phone": "+243 99 00 00 000",
            "business_verified": True,
        },
        "category": "Technologie",
        "publications": [
            {
                "type": PublicationType.SERVICE,
                "title": "Maintenance Informatique Entreprise",
                "description": "Contrat de maintenance pour vos ordinateurs et réseaux. Intervention rapide partout à Lubumbashi.",
                "content": "Nous proposons des services complets : nettoyage virus, installation Windows, configuration réseau...",
                "price": "Sur devis",
                "location": "Lubumbashi, Gombe",
                "status": PublicationStatus.APPROVED,
                "views": 150,
            },
            {
                "type": PublicationType.ANNOUNCEMENT,
                "title": "Promo : Laptop HP Core i5",
                "description": "Arrivage de PC portables venant d'Europe. Prix imbattable pour la rentrée !",
                "price": "350 $",
                "location": "Centre-ville, Lubumbashi",
                "status": PublicationStatus.APPROVED,
                "views": 89,
            },
        ],
    },
    {
        "user": {
            "email": "resto@simba.cd",
            "first_name": "Sarah",
            "last_name": "Mwamba",
            "business_name": "Le Goût du Katanga",
            "business_description": "Cuisine locale authentique et grillades.",
            "business_address": "Route Kinsevera, Lubumbashi",
            "business_phone": "+243 81 00 00 000",
            "business_verified": True,
        },
        "category": "Restauration",
        "publications": [
            {
                "type": PublicationType.ANNOUNCEMENT,
                "title": "Buffet spécial dimanche",
                "description": "Venez déguster notre buffet à volonté chaque dimanche. Poulet, Samoussa, Fumbwa...",
                "price": "25 000 FC",
                "location": "Lubumbashi, Golf",
                "status": PublicationStatus.APPROVED,
                "views": 240,
            },
        ],
    },
    {
        "user": {
            "email": "contact@hjclinique.cd",
            "first_name": "Jean-Pierre",
            "last_name": "Ilunga",
            "business_name": "HJ Clinique Lubumbashi",
            "business_description": "Services de santé de qualité, consultations spécialisées et imagerie médicale.",
            "business_address": "7577, Avenue de la Révolution, Lubumbashi",
            "business_phone": "+243 81 211 8453",
            "business_verified": True,
        },
        "category": "Santé",
        "publications": [
            {
                "type": PublicationType.SERVICE,
                "title": "Offre Check-up complet à 50$",
                "description": "Profitez d'un bilan de santé complet incluant plusieurs examens pour seulement 50 USD.",
                "price": "50 $",
                "location": "Lubumbashi, Centre-ville",
                "status": PublicationStatus.APPROVED,
                "views": 310,
            },
        ],
    },
    {
        "user": {
            "email": "contact@tendanceplus.cd",
            "first_name": "Chantal",
            "last_name": "Lunda",
            "business_name": "Tendance Plus Coiffure",
            "business_description": "Salon de coiffure mixte, tresses africaines, soins capillaires et manucure.",
            "business_address": "Avenue Kisale, Commune Kenya",
            "business_phone": "+243 85 987 6543",
            "business_verified": False,
        },
        "category": "Mode & Beauté",
        "publications": [
            {
                "type": PublicationType.SERVICE,
                "title": "Pose de Tresses (Nattes) Style Libre",
                "description": "Expertise en tresses africaines de tous styles. Prenez rendez-vous via WhatsApp.",
                "price": "À partir de 15 000 FC",
                "location": "Lubumbashi, Kenya",
                "status": PublicationStatus.PENDING,
                "views": 45,
            },
        ],
    },
]


def seed(db: Session, admin_password: str = DEFAULT_ADMIN_PASSWORD, demo: bool = True) -> dict[str, int]:
    """Insert missing seed rows; return how many of each kind were created."""
    storage = DatabaseStorage(db)
    created = {"categories": 0, "users": 0, "publications": 0}

    for category in CATEGORIES:
        if storage.get_category_by_name(category["name"]) is None:
            storage.create_category(category)
            created["categories"] += 1

    if storage.get_user_by_email(ADMIN_EMAIL) is None:
        storage.create_user(
            {
                "email": ADMIN_EMAIL,
                "password": hash_password(admin_password),
                "first_name": "Admin",
                "last_name": "CityLinker",
                "role": UserRole.ADMIN,
                "business_verified": True,
            }
        )
        created["users"] += 1

    if not demo:
        return created

    for business in DEMO_BUSINESSES:
        if storage.get_user_by_email(business["user"]["email"]) is not None:
            continue
        owner = storage.create_user(
            {
                **business["user"],
                "password": hash_password(DEMO_BUSINESS_PASSWORD),
                "role": UserRole.BUSINESS,
            }
        )
        created["users"] += 1
        category = storage.get_category_by_name(business["category"])
        if category is None:
            continue
        # Demo rows carry their own status and views, so they bypass create_publication.
        for fields in business["publications"]:
            db.add(Publication(user_id=owner.id, category_id=category.id, **fields))
            created["publications"] += 1
        db.commit()

    return created


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    parser = argparse.ArgumentParser(description="Seed the CityLinker database.")
    parser.add_argument("--admin-password", default=DEFAULT_ADMIN_PASSWORD)
    parser.add_argument("--no-demo", action="store_true", help="Only categories and the admin account")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        created = seed(db, admin_password=args.admin_password, demo=not args.no_demo)
        logger.info("Seed completed: %s", created)
        return 0
    except Exception as e:
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
