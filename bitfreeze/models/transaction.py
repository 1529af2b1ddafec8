from sqlalchemy import Column, Integer, String, Text

from bitfreeze.extensions import db


class DepositModel(db.Model):
    __tablename__ = "deposit"

    id = Column(String(32), primary_key=True)
    account_email = Column(String(255), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    phone = Column(String(32))
    status = Column(String(16), nullable=False, default="pending", index=True)
    gateway_ref = Column(String(128), unique=True, nullable=True)
    created_at = Column(Integer, nullable=False)
    confirmed_at = Column(Integer, nullable=True)
    failed_at = Column(Integer, nullable=True)


class WithdrawalModel(db.Model):
    __tablename__ = "withdrawal"

    id = Column(String(32), primary_key=True)
    account_email = Column(String(255), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    phone = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="pending", index=True)
    requested_at = Column(Integer, nullable=False)
    approved_at = Column(Integer, nullable=True)
    rejected_at = Column(Integer, nullable=True)
    rejection_reason = Column(Text, nullable=True)
