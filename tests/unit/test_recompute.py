"""Unit tests for recomputation selection, concurrency and batch policies."""

import asyncio

import pytest

from src.models.enums import BatchPolicy


async def _add(store, pane_id, name, is_stack=True, **fields):
    return await store.add_instance(pane_id, {"name": name, **fields}, is_stack=is_stack)


def _counting_calc(counter):
    def calc(data_list, indicator):
        counter[indicator.name] = counter.get(indicator.name, 0) + 1
        return [{"n": counter[indicator.name]} for _ in data_list]

    return calc


class TestCalcInstanceSelection:
    """Tests for which instances calc_instance recomputes."""

    @pytest.mark.asyncio
    async def test_name_and_pane_selects_single_instance(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane2", "SUM")
        counter = {}
        store.get_instance("pane1", "SUM").calc = _counting_calc(counter)
        store.get_instance("pane2", "SUM").calc = _counting_calc({})

        assert await store.calc_instance("SUM", "pane1") == [True]
        assert counter == {"SUM": 1}

    @pytest.mark.asyncio
    async def test_name_only_selects_across_panes(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane2", "SUM")
        await _add(store, "pane2", "PSUM")
        assert await store.calc_instance("SUM") == [True, True]

    @pytest.mark.asyncio
    async def test_no_arguments_selects_everything(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        await _add(store, "pane2", "VSUM")
        assert await store.calc_instance() == [True, True, True]

    @pytest.mark.asyncio
    async def test_missing_instance_selects_nothing(self, store):
        await _add(store, "pane1", "SUM")
        assert await store.calc_instance("SUM", "pane2") == []
        assert await store.calc_instance("PSUM") == []

    @pytest.mark.asyncio
    async def test_pane_without_name_is_unsupported(self, store):
        await _add(store, "pane1", "SUM")
        assert await store.calc_instance(pane_id="pane1") == []

    @pytest.mark.asyncio
    async def test_outcomes_in_selection_order(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        await _add(store, "pane1", "VSUM")

        def broken(_data, _indicator):
            raise ValueError("bad")

        store.get_instance("pane1", "PSUM").calc = broken
        assert await store.calc_instance() == [True, False, True]

    @pytest.mark.asyncio
    async def test_picks_up_new_data(self, store, data_source, candles):
        await _add(store, "pane1", "SUM")
        data_source.append(candles[-1])
        await store.calc_instance("SUM", "pane1")
        assert len(store.get_instance("pane1", "SUM").result) == len(candles) + 1


class TestConcurrency:
    """Batch recomputations run concurrently."""

    @pytest.mark.asyncio
    async def test_batch_launches_all_before_any_settles(self, store, gate_factory):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        gate = gate_factory()
        for instance in store.get_instances("pane1").values():
            instance.calc = gate

        batch = asyncio.ensure_future(store.calc_instance())
        for _ in range(5):
            await asyncio.sleep(0)
        assert gate.started == 2
        assert not batch.done()

        gate.event.set()
        assert await batch == [True, True]

    @pytest.mark.asyncio
    async def test_overlapping_recomputes_last_write_wins(self, store, gate_factory):
        await _add(store, "pane1", "SUM")
        instance = store.get_instance("pane1", "SUM")
        slow = gate_factory(payload="slow")
        instance.calc = slow
        first = asyncio.ensure_future(store.calc_instance("SUM", "pane1"))
        for _ in range(5):
            await asyncio.sleep(0)
        assert slow.started == 1

        instance.calc = lambda data_list, ind: [{"value": "fast"} for _ in data_list]
        assert await store.calc_instance("SUM", "pane1") == [True]
        assert instance.result[0] == {"value": "fast"}

        slow.event.set()
        assert await first == [True]
        assert instance.result[0] == {"value": "slow"}

    @pytest.mark.asyncio
    async def test_serialized_recomputes_run_one_at_a_time(self, store_factory, gate_factory):
        store = store_factory(serialize_recompute=True)
        await _add(store, "pane1", "SUM")
        instance = store.get_instance("pane1", "SUM")
        gate = gate_factory()
        instance.calc = gate

        first = asyncio.ensure_future(store.calc_instance("SUM", "pane1"))
        second = asyncio.ensure_future(store.calc_instance("SUM", "pane1"))
        for _ in range(5):
            await asyncio.sleep(0)
        assert gate.started == 1

        gate.event.set()
        assert await first == [True]
        assert await second == [True]
        assert gate.started == 2


class TestBatchPolicies:
    """Tests for collect-all and fail-fast aggregation."""

    @pytest.mark.asyncio
    async def test_collect_all_waits_for_every_outcome(self, store, gate_factory):
        assert store.settings.batch_policy is BatchPolicy.COLLECT_ALL
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        gate = gate_factory()
        store.get_instance("pane1", "SUM").calc = gate

        def broken(_data, _indicator):
            raise RuntimeError("boom")

        store.get_instance("pane1", "PSUM").calc = broken

        batch = asyncio.ensure_future(store.calc_instance())
        for _ in range(5):
            await asyncio.sleep(0)
        assert not batch.done()
        gate.event.set()
        assert await batch == [True, False]

    @pytest.mark.asyncio
    async def test_fail_fast_returns_at_first_failure(self, store_factory, gate_factory):
        store = store_factory(batch_policy=BatchPolicy.FAIL_FAST)
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        gate = gate_factory()
        slow = store.get_instance("pane1", "SUM")
        slow.calc = gate

        def broken(_data, _indicator):
            raise RuntimeError("boom")

        store.get_instance("pane1", "PSUM").calc = broken

        assert await store.calc_instance() == [False, False]

        # The unsettled recomputation keeps running and still applies its result.
        gate.event.set()
        await store.coordinator.drain()
        assert slow.result[0] == {"value": "done"}

    @pytest.mark.asyncio
    async def test_fail_fast_all_success(self, store_factory):
        store = store_factory(batch_policy=BatchPolicy.FAIL_FAST)
        await _add(store, "pane1", "SUM")
        await _add(store, "pane2", "SUM")
        assert await store.calc_instance("SUM") == [True, True]

    @pytest.mark.asyncio
    async def test_non_iterable_calc_output_is_a_failure(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        instance = store.get_instance("pane1", "SUM")
        before = list(instance.result)
        instance.calc = lambda _data, _indicator: 42

        assert await store.calc_instance() == [False, True]
        assert instance.result == before

    @pytest.mark.asyncio
    async def test_timeout_fails_only_the_stalled_instance(self, store_factory, gate_factory):
        store = store_factory(calc_timeout=0.05)
        await _add(store, "pane1", "SUM")
        await _add(store, "pane1", "PSUM")
        store.get_instance("pane1", "SUM").calc = gate_factory()
        assert await store.calc_instance() == [False, True]


class TestOverrideRecompute:
    """override() recomputes only on calc param changes."""

    @pytest.mark.asyncio
    async def test_presentational_change_does_not_recompute(self, store):
        await _add(store, "pane1", "SUM")
        counter = {}
        store.get_instance("pane1", "SUM").calc = _counting_calc(counter)

        assert await store.override({"name": "SUM", "shortName": "Total"}, "pane1") == []
        assert counter == {}
        assert store.get_instance("pane1", "SUM").short_name == "Total"

    @pytest.mark.asyncio
    async def test_calc_params_change_recomputes(self, store, candles):
        await _add(store, "pane1", "SUM")
        assert await store.override({"name": "SUM", "calcParams": [3]}, "pane1") == [True]
        result = store.get_instance("pane1", "SUM").result
        assert result[0]["sum"] == pytest.approx(candles[0].close * 3)

    @pytest.mark.asyncio
    async def test_unchanged_calc_params_do_not_recompute(self, store):
        await _add(store, "pane1", "SUM")
        assert await store.override({"name": "SUM", "calcParams": [1]}, "pane1") == []

    @pytest.mark.asyncio
    async def test_override_without_pane_targets_all_panes(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane2", "SUM")
        await _add(store, "pane2", "PSUM")
        assert await store.override({"name": "SUM", "calcParams": [4]}) == [True, True]
        assert store.get_instance("pane1", "SUM").calc_params == [4]
        assert store.get_instance("pane2", "SUM").calc_params == [4]
        assert store.get_instance("pane2", "PSUM").calc_params == [1]

    @pytest.mark.asyncio
    async def test_override_missing_pane_or_name(self, store):
        await _add(store, "pane1", "SUM")
        assert await store.override({"name": "SUM", "calcParams": [4]}, "pane9") == []
        assert await store.override({"name": "PSUM", "calcParams": [4]}) == []

    @pytest.mark.asyncio
    async def test_calc_swap_alone_does_not_recompute(self, store):
        await _add(store, "pane1", "SUM")
        instance = store.get_instance("pane1", "SUM")
        before = list(instance.result)

        def other(data_list, _indicator):
            return [{"other": True} for _ in data_list]

        assert await store.override({"name": "SUM", "calc": other}, "pane1") == []
        assert instance.calc is other
        assert instance.result == before

    @pytest.mark.asyncio
    async def test_failed_recompute_keeps_new_params_and_old_result(self, store):
        await _add(store, "pane1", "SUM")
        instance = store.get_instance("pane1", "SUM")
        before = list(instance.result)

        def broken(_data, _indicator):
            raise RuntimeError("boom")

        outcomes = await store.override({"name": "SUM", "calcParams": [2], "calc": broken}, "pane1")
        assert outcomes == [False]
        assert instance.calc_params == [2]
        assert instance.result == before

    @pytest.mark.asyncio
    async def test_failing_plot_regeneration_rolls_back_every_pane(self, store):
        await _add(store, "pane1", "SUM")
        await _add(store, "pane2", "SUM")
        counter = {}
        first = store.get_instance("pane1", "SUM")
        second = store.get_instance("pane2", "SUM")
        first.calc = second.calc = _counting_calc(counter)

        def broken_plots(_calc_params):
            raise RuntimeError("no plots")

        second.regenerate_plots = broken_plots

        with pytest.raises(RuntimeError, match="no plots"):
            await store.override({"name": "SUM", "shortName": "NEW", "calcParams": [3]})

        for instance in (first, second):
            assert (instance.short_name, instance.calc_params) == ("SUM", [1])
        assert counter == {}
