import pytest

from bitfreeze.domain.referrals import reward_for


@pytest.mark.parametrize(
    "amount,reward",
    [
        (100, 0),
        (499, 0),
        (500, 50),
        (999, 50),
        (1000, 100),
        (2000, 150),
        (4500, 250),
        (6000, 350),
        (8000, 500),
        (50000, 500),
    ],
)
def test_reward_for(amount, reward):
    assert reward_for(amount) == reward
