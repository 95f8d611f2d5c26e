from decimal import Decimal

import pytest

from dadabucks.config import BankConfig, load_config
from dadabucks.service import DadaBank


def test_defaults() -> None:
    config = load_config({})

    assert config == BankConfig()
    assert config.reset_hour == 22
    assert config.reset_label == "10 PM"
    assert config.interest_rate == Decimal("0.01")


def test_environment_overrides() -> None:
    config = load_config(
        {
            "DADABUCKS_RESET_HOUR": "0",
            "DADABUCKS_VAULT_MAX": "500",
            "DADABUCKS_MAX_STRIKES": "2",
            "DADABUCKS_INTEREST_RATE": "0.02",
            "DADABUCKS_CARRY_INTEREST": "yes",
            "DADABUCKS_PARENT_CHALLENGE": "3+4",
            "DADABUCKS_CHILD_NAME": "Robin",
            "DADABUCKS_LOCALE": "es",
            "DADABUCKS_DAILY_ALLOWANCE": "",
        }
    )

    assert config.reset_label == "12 AM"
    assert (config.vault_max, config.initial_vault_balance) == (500, 500)
    assert config.max_strikes == 2
    assert config.interest_rate == Decimal("0.02")
    assert config.carry_interest_forward is True
    assert config.parent_challenge == (3, 4)
    assert config.default_child_name == "Robin"
    assert config.daily_allowance == 40


@pytest.mark.parametrize(
    "environ",
    [
        {"DADABUCKS_RESET_HOUR": "25"},
        {"DADABUCKS_INTEREST_RATE": "lots"},
        {"DADABUCKS_PARENT_CHALLENGE": "seven"},
        {"DADABUCKS_VAULT_MAX": "10", "DADABUCKS_INITIAL_VAULT": "20"},
    ],
)
def test_invalid_configuration_is_rejected(environ) -> None:
    with pytest.raises(ValueError):
        load_config(environ)


def test_config_drives_the_engine(clock, ids) -> None:
    config = BankConfig(vault_max=200, initial_vault_balance=100, max_strikes=2, reset_hour=20)
    bank = DadaBank(config=config, clock=clock, id_factory=ids)
    child_id = bank.children[0].id

    bank.complete_task(child_id, "task-2")
    bank.add_strike(child_id, "a")
    result = bank.add_strike(child_id, "b")

    assert result.forfeited == 5
    assert bank.vault.balance == 100
    assert bank.vault.max_balance == 200
    assert bank.complete_task(child_id, "task-2").message.endswith("2 strikes today! All earnings forfeited.")
    assert bank.config.reset_label == "8 PM"
