# app/modules/users/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional

from app.shared.database.models import User, RiderApplication

class UsersRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_rider_application(self, email: str) -> Optional[RiderApplication]:
        return self.db.query(RiderApplication).filter(RiderApplication.email == email).first()

    def create_user(self, user_data: dict) -> User:
        """Insert a user with the default role"""
        user = User(**user_data, role='user')
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self, search: Optional[str] = None, role: Optional[str] = None) -> List[User]:
        query = self.db.query(User)

        if role:
            query = query.filter(User.role == role)

        if search:
            term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            search_pattern = f"%{term}%"
            query = query.filter(
                or_(
                    User.email.ilike(search_pattern, escape="\\"),
                    User.name.ilike(search_pattern, escape="\\")
                )
            )

        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    def set_role(self, user_id: int, role: str) -> int:
        """Conditional role update; returns the modified count"""
        modified = self.db.query(User).filter(
            User.id == user_id,
            User.role != role
        ).update({User.role: role}, synchronize_session=False)
        self.db.commit()
        return modified

    def list_active_riders(self, district: Optional[str] = None) -> List[RiderApplication]:
        query = self.db.query(RiderApplication).filter(RiderApplication.status == 'active')

        if district:
            query = query.filter(RiderApplication.district.ilike(district.strip()))

        return query.order_by(RiderApplication.name).all()
