import pytest

from matchbox.config import ExhaustionPolicy, LearningConfig


def test_defaults():
    cfg = LearningConfig()
    assert cfg.reinforce_both_players is False
    assert cfg.exhaustion is ExhaustionPolicy.REFILL
    assert cfg.dedup is True
    assert cfg.seed is None


def test_from_env_reads_overrides():
    cfg = LearningConfig.from_env({
        "MATCHBOX_REINFORCE_BOTH": "yes",
        "MATCHBOX_EXHAUSTION": "Report",
        "MATCHBOX_DEDUP": "0",
        "MATCHBOX_SEED": "42",
    })
    assert cfg == LearningConfig(True, ExhaustionPolicy.REPORT, False, 42)


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("MATCHBOX_SEED", "9")
    monkeypatch.delenv("MATCHBOX_EXHAUSTION", raising=False)
    assert LearningConfig.from_env().seed == 9


@pytest.mark.parametrize("name,value", [
    ("MATCHBOX_REINFORCE_BOTH", "maybe"),
    ("MATCHBOX_EXHAUSTION", "retry"),
    ("MATCHBOX_DEDUP", "2"),
    ("MATCHBOX_SEED", "abc"),
])
def test_from_env_rejects_bad_values(name, value):
    with pytest.raises(ValueError):
        LearningConfig.from_env({name: value})
