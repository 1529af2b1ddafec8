from enum import Enum


class Setting:
    def __init__(self, key, value):
        self.key = key
        self.value = value

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}


class SettingKey(Enum):
    LAST_ACCRUAL_RUN = "last_accrual_run"
    MIN_WITHDRAWAL = "min_withdrawal"
    REQUEST_COOLDOWN_HOURS = "request_cooldown_hours"
    ACCRUAL_GUARD_HOURS = "accrual_guard_hours"
    # Comma separated weekday numbers, Monday is 0
    WITHDRAWAL_DAYS = "withdrawal_days"
    SIMULATE_MPESA = "simulate_mpesa"


DEFAULT_SETTINGS = {
    SettingKey.LAST_ACCRUAL_RUN.value: "0",
    SettingKey.MIN_WITHDRAWAL.value: "200",
    SettingKey.REQUEST_COOLDOWN_HOURS.value: "24",
    SettingKey.ACCRUAL_GUARD_HOURS.value: "20",
    SettingKey.WITHDRAWAL_DAYS.value: "0,1,2,3,4",
    SettingKey.SIMULATE_MPESA.value: "False",
}
