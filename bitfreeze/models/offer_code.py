from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from bitfreeze.extensions import db


class OfferCodeModel(db.Model):
    __tablename__ = "offer_code"

    code = Column(String(64), primary_key=True)
    amount = Column(Integer, nullable=False)
    created_at = Column(Integer)

    redemptions = relationship("OfferRedemptionModel", cascade="all, delete-orphan", lazy="selectin")


class OfferRedemptionModel(db.Model):
    __tablename__ = "offer_redemption"
    __table_args__ = (UniqueConstraint("code", "account_email", name="uq_offer_redemption"),)

    id = Column(Integer, primary_key=True)
    code = Column(String(64), ForeignKey("offer_code.code"), nullable=False)
    account_email = Column(String(255), nullable=False)
    redeemed_at = Column(Integer)
