from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bitfreeze.extensions import db


class AccountModel(db.Model):
    __tablename__ = "account"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255))
    phone = Column(String(32), unique=True, nullable=True)
    balance = Column(Integer, nullable=False, default=0)
    earning = Column(Integer, nullable=False, default=0)
    referral_code = Column(String(16), unique=True)
    referred_by = Column(String(255), nullable=True)
    last_deposit_attempt = Column(Integer, nullable=True)
    last_withdrawal_attempt = Column(Integer, nullable=True)
    created_at = Column(Integer)

    fridges = relationship(
        "FridgeHoldingModel",
        order_by="FridgeHoldingModel.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class FridgeHoldingModel(db.Model):
    __tablename__ = "fridge_holding"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("account.id"), nullable=False, index=True)
    fridge_id = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False, default=0)
    daily_earn = Column(Integer, nullable=False, default=0)
    bought_at = Column(Integer)
    start_time = Column(Integer, nullable=True)
    duration_hours = Column(Integer, nullable=True)
    paid_out = Column(Boolean, nullable=False, default=False)
