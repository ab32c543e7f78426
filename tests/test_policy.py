import json
import logging
import warnings
from datetime import date

import portalocker
import pytest

from common_ground.core.exceptions import PolicyError
from common_ground.core.paths import policy_path
from common_ground.core.policy import Exclusion, Policy, PolicyStore, validate_policy

TODAY = date(2024, 6, 3)


def test_missing_keys_take_defaults():
    policy = Policy.from_dict({}, today=TODAY)
    assert policy.search_start_date == TODAY
    assert policy.daily_window_start == "09:00"
    assert policy.daily_window_end == "18:00"
    assert policy.exclusions == (Exclusion(start="12:00", end="13:00"),)
    assert policy.weekday_mask == (False, True, True, True, True, True, False)
    assert (policy.min_duration_minutes, policy.max_duration_minutes) == (60, 120)
    assert (policy.num_slots_required, policy.spread_days_target, policy.num_days_to_search) == (3, 2, 14)


def test_round_trip_through_dict():
    policy = Policy(
        search_start_date=TODAY,
        num_days_to_search=5,
        daily_window_start="10:00",
        daily_window_end="16:30",
        exclusions=(Exclusion(start="12:30", end="13:15"),),
        weekday_mask=(True,) * 7,
        min_duration_minutes=30,
        max_duration_minutes=45,
        num_slots_required=4,
        spread_days_target=2,
    )
    assert Policy.from_dict(policy.to_dict()) == policy


def test_weekday_mask_is_sunday_first():
    policy = Policy(search_start_date=TODAY, weekday_mask=(True, False, False, False, False, False, False))
    assert policy.allows_weekday(date(2024, 6, 2))  # Sunday
    assert not policy.allows_weekday(date(2024, 6, 3))  # Monday


@pytest.mark.parametrize(
    "payload",
    [
        {"max_duration_minutes": 30, "min_duration_minutes": 60},
        {"daily_window_start": "18:00", "daily_window_end": "09:00"},
        {"daily_window_start": "9am"},
        {"weekday_mask": [True, True]},
        {"weekday_mask": ["false"] * 7},
        {"weekday_mask": [0, 1, 1, 1, 1, 1, 0]},
        {"num_slots_required": 0},
        {"exclusions": [{"start": "12:00"}]},
        {"search_start_date": "June 3rd"},
        {"num_days_to_search": "many"},
    ],
)
def test_invalid_payloads_raise(payload):
    with pytest.raises(PolicyError):
        Policy.from_dict(payload, today=TODAY)


def test_spread_above_slot_count_only_warns(caplog):
    policy = Policy(search_start_date=TODAY, num_slots_required=2, spread_days_target=3)
    with caplog.at_level(logging.WARNING, logger="common_ground.policy"):
        validate_policy(policy)
    assert any(getattr(record, "event", None) == "policy_spread_unreachable" for record in caplog.records)


def test_store_defaults_when_file_missing(tmp_path):
    store = PolicyStore(tmp_path / "policy.json")
    assert store.load(today=TODAY) == Policy(search_start_date=TODAY)


def test_store_save_then_load(tmp_path):
    store = PolicyStore(tmp_path / "nested" / "policy.json")
    policy = Policy(search_start_date=TODAY, num_slots_required=5, spread_days_target=3)
    store.save(policy)
    assert store.load() == policy
    assert not (tmp_path / "nested" / "policy.tmp").exists()


def test_store_rejects_malformed_json(tmp_path):
    target = tmp_path / "policy.json"
    target.write_text("{oops", encoding="utf-8")
    with pytest.raises(PolicyError):
        PolicyStore(target).load()


def test_store_refuses_to_save_invalid_policy(tmp_path):
    store = PolicyStore(tmp_path / "policy.json")
    with pytest.raises(PolicyError):
        store.save(Policy(search_start_date=TODAY, min_duration_minutes=90, max_duration_minutes=30))
    assert not store.path.exists()


def test_default_store_lives_in_app_home(isolated_app_home):
    store = PolicyStore()
    store.update(lambda current: current.with_start_date(TODAY))
    assert store.path == policy_path()
    assert store.path.parent == isolated_app_home
    assert json.loads(store.path.read_text(encoding="utf-8"))["search_start_date"] == "2024-06-03"


def test_store_gives_up_when_policy_file_stays_locked(tmp_path):
    path = tmp_path / "policy.json"
    PolicyStore(path).save(Policy(search_start_date=TODAY))
    with portalocker.Lock(path, mode="a", flags=portalocker.LockFlags.EXCLUSIVE | portalocker.LockFlags.NON_BLOCKING):
        with pytest.raises(PolicyError):
            PolicyStore(path, lock_timeout=0.1).load()


def test_store_lock_timeout_is_honoured_without_warnings(tmp_path):
    store = PolicyStore(tmp_path / "policy.json")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        store.save(Policy(search_start_date=TODAY))
        assert store.load() == Policy(search_start_date=TODAY)
