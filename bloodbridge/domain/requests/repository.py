"""Request repository - Database operations for blood requests"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import BloodRequest, generate_id


class RequestRepository:
    """Repository for request database operations"""

    @staticmethod
    def get_request_by_id(db: Session, request_id: str) -> Optional[BloodRequest]:
        return db.query(BloodRequest).filter(BloodRequest.id == request_id).first()

    @staticmethod
    def get_requests_for_user(db: Session, user_id: str) -> list[BloodRequest]:
        """All of a user's posts, newest first"""
        return (
            db.query(BloodRequest)
            .filter(BloodRequest.user_id == user_id)
            .order_by(BloodRequest.created_at.desc())
            .all()
        )

    @staticmethod
    def get_recent_requests(db: Session, limit: int) -> list[BloodRequest]:
        """The live feed window"""
        return (
            db.query(BloodRequest)
            .order_by(BloodRequest.created_at.desc(), BloodRequest.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def add_request(db: Session, payload: dict) -> BloodRequest:
        """Stage a request in the current transaction; the caller commits"""
        request = BloodRequest(id=generate_id(), **payload)
        db.add(request)
        db.flush()
        return request

    @staticmethod
    def delete_request(db: Session, request: BloodRequest) -> None:
        db.delete(request)
        db.commit()
