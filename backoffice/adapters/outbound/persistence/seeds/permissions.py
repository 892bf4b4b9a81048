# backoffice/adapters/outbound/persistence/seeds/permissions.py

"""
Seed script for the default roles, permission catalogue and grants.

Safe to run repeatedly: existing rows are kept, parent links are reset
and the grants of the seeded roles are replaced.
"""

import logging
from typing import Callable, Dict, List

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.outbound.persistence.database import sync_database_url
from backoffice.adapters.outbound.persistence.models import Admin, Permission, Role

logger = logging.getLogger(__name__)

# Roles
roles = [
    {"code": "super_admin", "name": "Super Administrator", "description": "Holds every permission"},
    {"code": "admin", "name": "Administrator", "description": "Every permission except system management"},
    {"code": "operator", "name": "Operator", "description": "Day to day operations"},
    {"code": "viewer", "name": "Viewer", "description": "Read-only access"},
]

# Permission catalogue
permissions = [
    {"code": "dashboard", "name": "Dashboard", "type": "menu", "path": "/dashboard",
     "component": "dashboard/index", "icon": "Dashboard", "sort": 1},

    {"code": "products", "name": "Products", "type": "menu", "path": "/products",
     "component": "Layout", "icon": "Goods", "sort": 2},
    {"code": "products.list", "name": "Product List", "type": "page", "path": "/products/list",
     "component": "products/ProductList", "sort": 1},
    {"code": "products.create", "name": "Create Product", "type": "button"},
    {"code": "products.edit", "name": "Edit Product", "type": "button"},
    {"code": "products.delete", "name": "Delete Product", "type": "button"},

    {"code": "campaigns", "name": "Campaigns", "type": "menu", "path": "/campaigns",
     "component": "Layout", "icon": "Promotion", "sort": 3},
    {"code": "campaigns.list", "name": "Campaign List", "type": "page", "path": "/campaigns/list",
     "component": "campaigns/CampaignList", "sort": 1},
    {"code": "campaigns.create", "name": "Create Campaign", "type": "button"},
    {"code": "campaigns.edit", "name": "Edit Campaign", "type": "button"},
    {"code": "campaigns.delete", "name": "Delete Campaign", "type": "button"},

    {"code": "coupons", "name": "Coupons", "type": "menu", "path": "/coupons",
     "component": "Layout", "icon": "Ticket", "sort": 4},
    {"code": "coupons.list", "name": "Coupon List", "type": "page", "path": "/coupons/list",
     "component": "coupons/CouponList", "sort": 1},
    {"code": "coupons.create", "name": "Create Coupon", "type": "button"},
    {"code": "coupons.edit", "name": "Edit Coupon", "type": "button"},
    {"code": "coupons.delete", "name": "Delete Coupon", "type": "button"},

    {"code": "finance", "name": "Finance", "type": "menu", "path": "/finance",
     "component": "Layout", "icon": "Money", "sort": 5},
    {"code": "finance.transactions", "name": "Transactions", "type": "page", "path": "/finance/transactions",
     "component": "finance/TransactionList", "sort": 1},
    {"code": "finance.recharge", "name": "Recharges", "type": "page", "path": "/finance/recharge",
     "component": "finance/RechargeForm", "sort": 2},
    {"code": "finance.withdraw", "name": "Withdrawals", "type": "page", "path": "/finance/withdraw",
     "component": "finance/WithdrawForm", "sort": 3},
    {"code": "finance.audit", "name": "Audit Transaction", "type": "button"},

    {"code": "customers", "name": "Customers", "type": "menu", "path": "/customers",
     "component": "Layout", "icon": "User", "sort": 6},
    {"code": "customers.list", "name": "Customer List", "type": "page", "path": "/customers/list",
     "component": "customers/CustomerList", "sort": 1},
    {"code": "customers.edit", "name": "Edit Customer", "type": "button"},
    {"code": "customers.delete", "name": "Delete Customer", "type": "button"},

    {"code": "system", "name": "System", "type": "menu", "path": "/system",
     "component": "Layout", "icon": "Setting", "sort": 7},
    {"code": "system.admins", "name": "Admins", "type": "page", "path": "/system/admins",
     "component": "system/AdminList", "sort": 1},
    {"code": "system.roles", "name": "Roles", "type": "page", "path": "/system/roles",
     "component": "system/RoleList", "sort": 2},
    {"code": "system.permissions", "name": "Permissions", "type": "page", "path": "/system/permissions",
     "component": "system/PermissionList", "sort": 3},
    {"code": "system.config", "name": "Settings", "type": "page", "path": "/system/config",
     "component": "system/SystemConfig", "sort": 4},

    {"code": "statistics", "name": "Statistics", "type": "menu", "path": "/statistics",
     "component": "Layout", "icon": "DataAnalysis", "sort": 8},
    {"code": "statistics.overview", "name": "Overview", "type": "page", "path": "/statistics/overview",
     "component": "statistics/Overview", "sort": 1},
    {"code": "statistics.products", "name": "Product Statistics", "type": "page", "path": "/statistics/products",
     "component": "statistics/ProductStats", "sort": 2},
    {"code": "statistics.revenue", "name": "Revenue Statistics", "type": "page", "path": "/statistics/revenue",
     "component": "statistics/RevenueStats", "sort": 3},
]


def _parent_code(code: str) -> str:
    """'products.create' -> 'products', top level codes have no parent."""
    return code.rsplit(".", 1)[0] if "." in code else ""


def _in_sections(*sections: str) -> Callable[[Permission], bool]:
    return lambda p: any(p.code == s or p.code.startswith(f"{s}.") for s in sections)


# Grants per role
role_grants: Dict[str, Callable[[Permission], bool]] = {
    "super_admin": lambda p: True,
    "admin": lambda p: not p.code.startswith("system."),
    "operator": _in_sections("dashboard", "products", "campaigns", "coupons", "customers"),
    "viewer": lambda p: p.type in ("menu", "page") and not p.code.endswith((".create", ".edit", ".delete")),
}


def run_permissions_seed(session: Session) -> None:
    """
    Create the default roles and permissions, link parents and grant permissions.

    Args:
        session: Synchronous database session
    """
    try:
        # Roles
        role_objs: Dict[str, Role] = {}
        for data in roles:
            role = session.query(Role).filter_by(code=data["code"]).first()
            if not role:
                role = Role(title=data["name"], status=1, creator_id=0, **data)
                session.add(role)
                logger.info(f"Role '{data['code']}' created.")
            else:
                logger.info(f"Role '{data['code']}' already exists.")
            role_objs[data["code"]] = role

        # Permissions
        permission_objs: Dict[str, Permission] = {}
        for data in permissions:
            perm = session.query(Permission).filter_by(code=data["code"]).first()
            if not perm:
                perm = Permission(title=data["name"], parent_id=0, status=1, **data)
                session.add(perm)
                logger.info(f"Permission '{data['code']}' created.")
            else:
                logger.info(f"Permission '{data['code']}' already exists.")
            permission_objs[data["code"]] = perm
        session.flush()

        # Parent links
        for code, perm in permission_objs.items():
            parent = permission_objs.get(_parent_code(code))
            perm.parent_id = parent.id if parent else 0

        # Grants
        catalogue: List[Permission] = list(permission_objs.values())
        for role_code, predicate in role_grants.items():
            granted = [p for p in catalogue if predicate(p)]
            role_objs[role_code].permissions = granted
            logger.info(f"Role '{role_code}' granted {len(granted)} permissions.")

        # Default admin holds the super admin role
        admin = session.query(Admin).filter_by(username=settings.DEFAULT_ADMIN_USERNAME).first()
        if not admin:
            admin = Admin(username=settings.DEFAULT_ADMIN_USERNAME, nickname="Administrator", role_level=1, status=1)
            session.add(admin)
            logger.info(f"Admin '{settings.DEFAULT_ADMIN_USERNAME}' created.")
        admin.roles = [role_objs["super_admin"]]

        session.commit()
        logger.info("Permission seed finished successfully.")
    except Exception as e:
        session.rollback()
        logger.error(f"Error running permission seed: {e}")
        raise


def sync_session_factory() -> sessionmaker:
    """Session factory over a synchronous engine built from ``DATABASE_URL``."""
    engine = create_engine(sync_database_url(str(settings.DATABASE_URL)), future=True)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    with sync_session_factory()() as db:
        run_permissions_seed(db)
