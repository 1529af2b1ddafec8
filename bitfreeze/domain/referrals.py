# Minimum deposit => reward credited to the referrer, highest threshold first
REFERRAL_RULES: list[tuple[int, int]] = [
    (8000, 500),
    (6000, 350),
    (4000, 250),
    (2000, 150),
    (1000, 100),
    (500, 50),
]


def reward_for(amount: int) -> int:
    """Return the referral reward for a confirmed deposit, or 0 if no rule matches."""
    for threshold, reward in REFERRAL_RULES:
        if amount >= threshold:
            return reward
    return 0
