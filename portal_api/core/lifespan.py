"""Application lifespan: startup provisioning, engine disposal on shutdown."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from portal_api.core.config import get_settings
from portal_api.core.database import SessionLocal, engine
from portal_api.services.bootstrap import ensure_super_admin

logger = logging.getLogger(__name__)


def run_bootstrap() -> None:
    """Provision the super admin; a failure is logged and startup continues."""
    db = SessionLocal()
    try:
        ensure_super_admin(db, get_settings())
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Super admin bootstrap failed; continuing startup")
    except Exception:
        logger.exception("Super admin bootstrap raised unexpectedly; continuing startup")
    finally:
        db.close()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    run_bootstrap()
    yield
    engine.dispose()
    logger.info("Database engine disposed")
