"""Camp repository - Database operations for camp requests"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import CampRequest, generate_id


class CampRepository:
    """Repository for camp request database operations"""

    @staticmethod
    def get_camps_for_user(db: Session, user_id: str) -> list[CampRequest]:
        return (
            db.query(CampRequest)
            .filter(CampRequest.user_id == user_id)
            .order_by(CampRequest.created_at.desc())
            .all()
        )

    @staticmethod
    def get_camp_by_id(db: Session, camp_id: str, user_id: Optional[str] = None) -> Optional[CampRequest]:
        query = db.query(CampRequest).filter(CampRequest.id == camp_id)
        if user_id is not None:
            query = query.filter(CampRequest.user_id == user_id)
        return query.first()

    @staticmethod
    def create_camp(db: Session, payload: dict) -> CampRequest:
        camp = CampRequest(id=generate_id(), **payload)
        db.add(camp)
        db.commit()
        db.refresh(camp)
        return camp

    @staticmethod
    def update_camp(db: Session, camp: CampRequest, **updates) -> CampRequest:
        for key, value in updates.items():
            if hasattr(camp, key):
                setattr(camp, key, value)
        db.commit()
        db.refresh(camp)
        return camp

    @staticmethod
    def delete_camp(db: Session, camp: CampRequest) -> None:
        db.delete(camp)
        db.commit()
