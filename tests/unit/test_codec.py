"""Tests for state serialization and migration of older payloads."""

import json
from datetime import date

import pytest

from vestcalc.sdk.assumptions import AssumptionModel
from vestcalc.sdk.codec import STATE_VERSION, deserialize, serialize
from vestcalc.sdk.commands import SetFmv, SetGrowthRate, SetPostMoney, SetTitle
from vestcalc.sdk.grants import GrantRepository
from vestcalc.sdk.schemas import Assumptions, GrantFields


@pytest.fixture
def populated():
    """Three grants (middle one removed) and edited assumptions."""
    repo = GrantRepository()
    repo.add()
    repo.add(shares=1000, start="2025-03-01", years=4)
    repo.add(shares=250, start="2023-02-28", years=2, title="Advisor")
    repo.remove(2)
    repo.update(1, SetTitle("Founder"))

    model = AssumptionModel()
    model.apply(SetPostMoney(250_000_000))
    model.apply(SetGrowthRate(20))
    return repo, model


class TestSerialize:

    def test_payload_shape(self, populated):
        repo, model = populated

        payload = serialize(repo, model)

        assert payload["version"] == STATE_VERSION
        assert payload["assumptions"] == {
            "totalShares": 10_000_000,
            "postMoney": 250_000_000.0,
            "fmv": 25.0,
            "conversionDate": "2025-12-01",
            "taxRate": 42.0,
            "growthRate": 20.0,
        }
        assert payload["grants"][1] == {
            "id": 3, "shares": 250, "start": "2023-02-28", "years": 2, "title": "Advisor",
        }
        assert payload["meta"] == {"fmvLocked": False, "nextId": 4}

    def test_payload_is_json_serializable(self, populated):
        json.dumps(serialize(*populated))


class TestRoundTrip:

    def test_restores_grants_and_assumptions(self, populated):
        repo, model = populated

        saved = deserialize(serialize(repo, model))

        assert saved.grants == repo.grants
        assert saved.next_id == 4
        assert saved.assumptions == model.values
        assert saved.meta.fmv_locked is False

    def test_locked_fmv_survives(self, populated):
        repo, model = populated
        model.apply(SetFmv(3.25))

        saved = deserialize(json.dumps(serialize(repo, model)))

        assert saved.meta.fmv_locked is True
        assert saved.assumptions.fmv == 3.25

    def test_empty_grant_list(self):
        saved = deserialize(serialize(GrantRepository(), AssumptionModel()))

        assert saved.grants == []
        assert saved.next_id == 1


class TestMalformedPayloads:

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "not json",
        b"\xff\xfe",
        "[1, 2]",
        {},
        {"grants": "many"},
        {"grants": None, "assumptions": {"taxRate": 10}},
    ])
    def test_structurally_unusable(self, payload):
        assert deserialize(payload) is None


class TestLegacyMigration:

    def test_v1_per_grant_rates(self):
        payload = {
            "grants": [
                {"id": 1, "shares": 1000, "start": "2024-01-01", "years": 4,
                 "name": "Old", "taxRate": 25, "growthRate": 10},
            ],
        }

        saved = deserialize(payload)

        assert saved.assumptions.tax_rate == 25.0
        assert saved.assumptions.growth_rate == 10.0
        assert saved.grants[0].title == "Old"

    def test_v1_first_grant_carrying_field_wins(self):
        payload = {
            "grants": [
                {"id": 1},
                {"id": 2, "taxRate": 30},
                {"id": 3, "taxRate": 50, "growthRate": 5},
            ],
        }

        saved = deserialize(payload)

        assert saved.assumptions.tax_rate == 30.0
        assert saved.assumptions.growth_rate == 5.0

    def test_global_beats_legacy(self):
        payload = {
            "global": {"taxRate": 33},
            "grants": [{"id": 1, "taxRate": 25, "growthRate": 10}],
        }

        saved = deserialize(payload)

        assert saved.assumptions.tax_rate == 33.0
        assert saved.assumptions.growth_rate == 10.0

    def test_assumptions_beat_global(self):
        payload = {
            "global": {"taxRate": 33, "growthRate": 12},
            "assumptions": {"taxRate": 20},
            "grants": [],
        }

        saved = deserialize(payload)

        assert saved.assumptions.tax_rate == 20.0
        assert saved.assumptions.growth_rate == 12.0

    def test_alias_keys(self):
        payload = {
            "assumptions": {"totalSharesOutstanding": 5_000_000, "postMoneyValuation": 10_000_000},
            "grants": [],
        }

        saved = deserialize(payload)

        assert saved.assumptions.total_shares_outstanding == 5_000_000
        assert saved.assumptions.fmv == 2.0

    def test_legacy_values_are_sanitized(self):
        payload = {
            "assumptions": {"taxRate": 500, "growthRate": "abc", "totalShares": -4, "conversionDate": "nope"},
            "grants": [{"id": 1, "shares": -20, "years": 0, "start": "2024-02-30", "title": 7}],
        }

        saved = deserialize(payload)

        assert saved.assumptions.tax_rate == 100.0
        assert saved.assumptions.growth_rate == 0.0
        assert saved.assumptions.total_shares_outstanding == 1
        assert saved.assumptions.conversion_date == date(2025, 12, 1)
        grant = saved.grants[0]
        assert (grant.shares, grant.years, grant.start, grant.title) == (1, 1, date(2024, 1, 1), "")

    def test_numbers_beyond_float_range_use_defaults(self):
        huge = "1" + "0" * 400
        text = (
            '{"assumptions": {"postMoney": ' + huge + ', "fmv": ' + huge + ', "taxRate": ' + huge + '},'
            ' "grants": [{"id": 1, "shares": ' + huge + '}]}'
        )

        saved = deserialize(text)

        assert saved.assumptions.post_money_valuation == 100_000_000.0
        assert saved.assumptions.fmv == 10.0
        assert saved.assumptions.tax_rate == 0.0
        assert saved.grants[0].shares == 1


class TestFmvOnLoad:

    def test_fmv_rederived_from_valuation(self):
        payload = {"assumptions": {"totalShares": 1000, "postMoney": 50000, "fmv": 999}, "grants": []}

        assert deserialize(payload).assumptions.fmv == 50.0

    def test_locked_fmv_kept(self):
        payload = {
            "assumptions": {"totalShares": 1000, "postMoney": 50000, "fmv": 999},
            "grants": [],
            "meta": {"fmvLocked": True},
        }

        assert deserialize(payload).assumptions.fmv == 999.0

    def test_fmv_alone_is_kept(self):
        payload = {"assumptions": {"fmv": 7.5}, "grants": []}

        assert deserialize(payload).assumptions.fmv == 7.5

    def test_defaults_used_for_missing_fields(self):
        defaults = Assumptions(tax_rate=30, growth_rate=5)

        saved = deserialize({"grants": []}, defaults)

        assert saved.assumptions.tax_rate == 30.0
        assert saved.assumptions.growth_rate == 5.0


class TestGrantIds:

    def test_invalid_and_duplicate_ids_get_fresh_ones(self):
        payload = {"grants": [{"id": 3}, {"id": "x"}, {"id": 3}, "junk", {"id": 7}, {}]}

        saved = deserialize(payload)

        assert [g.id for g in saved.grants] == [3, 8, 9, 7, 10]
        assert saved.next_id == 11

    def test_top_level_next_id_is_ignored(self):
        payload = {"nextId": 99, "grants": [{"id": 2}]}

        assert deserialize(payload).next_id == 3

    def test_saved_counter_survives_removal_of_highest_id(self):
        repo = GrantRepository()
        repo.add()
        repo.add()
        repo.remove(2)

        saved = deserialize(serialize(repo, AssumptionModel()))

        assert saved.next_id == 3
        assert GrantRepository(saved.grants, saved.next_id).add().id == 3

    def test_saved_counter_survives_removal_of_every_grant(self):
        repo = GrantRepository()
        repo.add()
        repo.remove(1)

        assert deserialize(serialize(repo, AssumptionModel())).next_id == 2

    @pytest.mark.parametrize("saved_next_id", [1, 0, -3, "x", 2.5, None])
    def test_saved_counter_never_behind_ids_in_use(self, saved_next_id):
        payload = {"grants": [{"id": 4}], "meta": {"nextId": saved_next_id}}

        assert deserialize(payload).next_id == 5

    def test_missing_grant_fields_use_template(self):
        template = GrantFields(shares=1234, years=3)

        saved = deserialize({"grants": [{"id": 1, "years": 5}]}, grant_template=template)

        assert saved.grants[0].shares == 1234
        assert saved.grants[0].years == 5
