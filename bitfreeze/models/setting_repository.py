from flask_sqlalchemy import SQLAlchemy

from bitfreeze.domain.settings import DEFAULT_SETTINGS, Setting, SettingKey
from bitfreeze.models.setting import SettingModel


class SqlAlchemySettingRepository:
    def __init__(self, db: SQLAlchemy) -> None:
        self._session = db.session

    def _to_model(self, setting: Setting) -> SettingModel:
        return SettingModel(key=setting.key, value=str(setting.value))

    def _to_domain(self, model: SettingModel) -> Setting:
        # Convert the string 'True' or 'False' to a boolean
        if model.value in ["True", "False"]:
            return Setting(key=model.key, value=model.value == "True")
        return Setting(key=model.key, value=model.value)

    def get_all(self) -> list[Setting]:
        results: list[SettingModel] = self._session.query(SettingModel).all()
        return list(map(self._to_domain, results))

    def get(self, key):
        if isinstance(key, SettingKey):
            key = key.value
        result = self._session.get(SettingModel, key)
        if result is None:
            # Rows added after the table was first created fall back to their default
            return self._to_domain(SettingModel(key=key, value=DEFAULT_SETTINGS[key])).value
        return self._to_domain(result).value

    def get_int(self, key) -> int:
        return int(self.get(key))

    def get_days(self, key) -> set[int]:
        value = str(self.get(key) or "")
        return {int(d) for d in value.split(",") if d.strip() != ""}

    def save(self, setting: Setting, commit: bool = True) -> None:
        model = self._to_model(setting)
        self._session.merge(model)
        if commit:
            self._session.commit()
