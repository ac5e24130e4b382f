# backend/database/demo_data.py
"""Seed the default sectors and cleaning-supply catalog."""

import logging

from sqlalchemy.orm import Session

from database.session import SessionLocal, init_db
from models.client_model import Client
from models.product_model import Product

logger = logging.getLogger(__name__)

DEMO_CLIENTS = [
    {"sector_name": "Setor Administrativo", "client_code": "ADM-01"},
    {"sector_name": "Setor de Limpeza", "client_code": "LMP-01"},
    {"sector_name": "Setor de Manutenção", "client_code": "MNT-01"},
    {"sector_name": "Cozinha/Refeitório", "client_code": "COZ-01"},
    {"sector_name": "Recepção", "client_code": "RCP-01"},
]

DEMO_PRODUCTS = [
    {"name": "Detergente Neutro 5L", "unit": "UN", "product_code": "LMP-001", "stock": 50, "category": "Limpeza"},
    {"name": "Desinfetante 2L", "unit": "UN", "product_code": "LMP-002", "stock": 30, "category": "Limpeza"},
    {"name": "Álcool Gel 500ml", "unit": "UN", "product_code": "LMP-003", "stock": 100, "category": "Higiene"},
    {"name": "Papel Toalha (pacote)", "unit": "CX", "product_code": "LMP-004", "stock": 25, "category": "Higiene"},
    {"name": "Sabonete Líquido 1L", "unit": "UN", "product_code": "LMP-005", "stock": 40, "category": "Higiene"},
    {"name": "Saco de Lixo 100L", "unit": "CX", "product_code": "LMP-006", "stock": 20, "category": "Limpeza"},
    {"name": "Luva de Látex (par)", "unit": "CX", "product_code": "EPI-001", "stock": 150, "category": "EPI"},
    {"name": "Pano de Limpeza", "unit": "UN", "product_code": "LMP-007", "stock": 80, "category": "Limpeza"},
]


def seed_clients(db: Session) -> bool:
    """Insert the default sectors, only into an empty collection."""
    if db.query(Client).first():
        logger.info("Clients already present, skipping")
        return False
    db.add_all(Client(active=True, **data) for data in DEMO_CLIENTS)
    db.commit()
    logger.info(f"Added {len(DEMO_CLIENTS)} clients")
    return True


def seed_products(db: Session) -> bool:
    if db.query(Product).first():
        logger.info("Products already present, skipping")
        return False
    db.add_all(Product(active=True, **data) for data in DEMO_PRODUCTS)
    db.commit()
    logger.info(f"Added {len(DEMO_PRODUCTS)} products")
    return True


def create_demo_data(db: Session = None) -> dict:
    own_session = db is None
    if own_session:
        init_db()
        db = SessionLocal()
    try:
        return {
            "clients_added": seed_clients(db),
            "products_added": seed_products(db),
        }
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(create_demo_data())
