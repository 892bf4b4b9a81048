# backoffice/adapters/outbound/persistence/seeds/__init__.py

"""
Seeds for database initialization.

Functions that fill the database with the data the back-office needs
to be usable right after installation.
"""

import logging
from sqlalchemy.orm import Session

from backoffice.adapters.outbound.persistence.seeds.permissions import run_permissions_seed

logger = logging.getLogger(__name__)


def run_all_seeds(db: Session) -> None:
    """
    Run every seed script in dependency order.

    Args:
        db: Synchronous database session
    """
    logger.info("Running all seeds")
    run_permissions_seed(db)
    logger.info("All seeds finished")
