# boutique/repositories/coupon_repo.py
import uuid

from sqlalchemy import or_, update
from sqlmodel import Session, select

from boutique.models.coupon import Coupon
from boutique.schemas.coupon import CouponRead


class CouponRepository:
    """
    Data access layer for coupons.

    The two methods used by checkout return `CouponRead`, never raw rows.
    """

    # ----- Pricing collaborators -----

    def get_active_by_code(self, session: Session, code: str) -> CouponRead | None:
        stmt = select(Coupon).where(Coupon.code == code, Coupon.active == True)  # noqa: E712
        row = session.exec(stmt).first()
        if row is None:
            return None
        return CouponRead.model_validate(row)

    def increment_usage_if_below_cap(
        self, session: Session, coupon_id: uuid.UUID
    ) -> CouponRead | None:
        """
        Increment used_count in a single conditional UPDATE.

        Returns None when no row was updated, i.e. the coupon is gone or
        max_uses was already reached.
        """
        stmt = (
            update(Coupon)
            .where(Coupon.id == coupon_id)
            .where(or_(Coupon.max_uses.is_(None), Coupon.used_count < Coupon.max_uses))
            .values(used_count=Coupon.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        session.commit()

        if result.rowcount == 0:
            return None

        row = session.get(Coupon, coupon_id)
        return CouponRead.model_validate(row) if row else None

    # ----- Admin CRUD -----

    def list(self, session: Session) -> list[Coupon]:
        stmt = select(Coupon).order_by(Coupon.created_at.desc())
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, coupon_id: uuid.UUID) -> Coupon | None:
        return session.get(Coupon, coupon_id)

    def get_by_code(self, session: Session, code: str) -> Coupon | None:
        stmt = select(Coupon).where(Coupon.code == code)
        return session.exec(stmt).first()

    def create(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def update(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def delete(self, session: Session, coupon: Coupon) -> None:
        session.delete(coupon)
        session.commit()
