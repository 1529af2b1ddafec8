from sqlalchemy import event

from bitfreeze.domain.settings import DEFAULT_SETTINGS
from bitfreeze.extensions import db


class SettingModel(db.Model):
    key = db.Column(db.String, primary_key=True)
    value = db.Column(db.String(2048))


@event.listens_for(SettingModel.__table__, "after_create")
def after_create(tbl, conn, **kw) -> None:
    conn.execute(
        tbl.insert(),
        [{"key": key, "value": value} for key, value in DEFAULT_SETTINGS.items()],
    )
