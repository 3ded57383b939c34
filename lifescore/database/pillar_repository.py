"""Repository for Pillar database operations."""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from lifescore.models.task import Pillar, PillarWeight
from lifescore.database.models import PillarDB

logger = logging.getLogger(__name__)


class PillarRepository:
    """Repository for Pillar database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, pillar: Pillar) -> Pillar:
        """Create a new pillar."""
        try:
            pillar_db = PillarDB.from_pydantic(pillar)
            self.db.add(pillar_db)
            self.db.commit()
            self.db.refresh(pillar_db)
            logger.debug(f"Created pillar {pillar.id}: {pillar.name}")
            return pillar_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create pillar {pillar.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, pillar_id: str) -> Optional[Pillar]:
        pillar_db = self.db.query(PillarDB).filter(
            PillarDB.id == pillar_id,
            PillarDB.user_id == user_id,
        ).first()
        return pillar_db.to_pydantic() if pillar_db else None

    def get_all(self, user_id: str, include_archived: bool = False) -> List[Pillar]:
        """Get a user's pillars in creation order."""
        query = self.db.query(PillarDB).filter(PillarDB.user_id == user_id)
        if not include_archived:
            query = query.filter(PillarDB.is_archived.is_(False))
        return [p.to_pydantic() for p in query.order_by(PillarDB.created_at).all()]

    def get_weights(self, user_id: str) -> List[PillarWeight]:
        """Weights of the user's non-archived pillars (scoring input)."""
        return [PillarWeight(pillar_id=p.id, weight=p.weight) for p in self.get_all(user_id)]

    def archive(self, user_id: str, pillar_id: str) -> bool:
        """Archive a pillar. Returns False when not found."""
        pillar_db = self.db.query(PillarDB).filter(
            PillarDB.id == pillar_id,
            PillarDB.user_id == user_id,
        ).first()
        if not pillar_db:
            return False
        pillar_db.is_archived = True
        try:
            self.db.commit()
            logger.debug(f"Archived pillar {pillar_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to archive pillar {pillar_id}: {type(e).__name__}: {str(e)}")
            raise

    def update(self, pillar: Pillar) -> Pillar:
        """Update an existing pillar (user_id must match pillar.user_id)."""
        pillar_db = self.db.query(PillarDB).filter(
            PillarDB.id == pillar.id,
            PillarDB.user_id == pillar.user_id,
        ).first()
        if not pillar_db:
            raise ValueError(f"Pillar {pillar.id} not found")

        pillar_db.name = pillar.name
        pillar_db.emoji = pillar.emoji
        pillar_db.color = pillar.color
        pillar_db.weight = pillar.weight
        pillar_db.is_archived = pillar.is_archived

        try:
            self.db.commit()
            self.db.refresh(pillar_db)
            logger.debug(f"Updated pillar {pillar.id}")
            return pillar_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update pillar {pillar.id}: {type(e).__name__}: {str(e)}")
            raise
