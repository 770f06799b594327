"""InteractionAdapter: pointer samples become live cells."""

import pytest

from life import InteractionAdapter, LifeConfig, SimState, Simulator
from life_render import PixelSurface
from conftest import live_cells


@pytest.fixture
def sim(rng):
    sim = Simulator(LifeConfig(cell_pitch=10, max_ships=0), rng=rng)
    sim.resize(PixelSurface(100, 50), randomize=False)
    return sim


class TestMapping:
    def test_integer_division_by_pitch(self, sim):
        adapter = InteractionAdapter(sim)
        assert adapter.cells_for([(15, 25), (0, 0), (99.9, 49.9)]) == [(1, 2), (0, 0), (9, 4)]

    def test_out_of_range_samples_are_dropped(self, sim):
        adapter = InteractionAdapter(sim)
        assert adapter.cells_for([(-1, 0), (100, 0), (0, 50), (0, -0.5)]) == []

    def test_origin_offsets_samples(self, sim):
        adapter = InteractionAdapter(sim, origin=(200, 100))
        assert adapter.cells_for([(215, 125), (199, 100)]) == [(1, 2)]


class TestPainting:
    def test_multi_touch_paints_every_sample(self, sim):
        adapter = InteractionAdapter(sim)
        adapter.paint([(5, 5), (55, 35)])
        sim.tick(0.0)
        assert live_cells(sim.grid) == {(0, 0), (5, 3)}

    def test_disabled_adapter_paints_nothing(self, sim):
        adapter = InteractionAdapter(sim, enabled=False)
        assert adapter.paint([(5, 5)]) == []
        assert adapter.pointer_down([(5, 5)]) == []
        sim.tick(0.0)
        assert sim.population() == 0
        assert sim.state is SimState.RUNNING

    def test_stroke_holds_the_rule_until_release(self, sim):
        adapter = InteractionAdapter(sim)
        adapter.pointer_down([(25, 25)])
        assert sim.state is SimState.INTERACTING
        sim.tick(0.0)
        adapter.pointer_move([(35, 25)])
        sim.tick(150.0)
        sim.tick(300.0)
        # Two lone cells would die under the rule; the stroke keeps them
        assert live_cells(sim.grid) == {(2, 2), (3, 2)}
        assert sim.fade.value(2, 2) > 0.0
        adapter.pointer_up()
        assert sim.state is SimState.RUNNING
        sim.tick(450.0)
        assert sim.population() == 0

    def test_pointer_up_without_down_is_harmless(self, sim):
        adapter = InteractionAdapter(sim)
        sim.pause()
        adapter.pointer_up()
        assert sim.state is SimState.PAUSED

    def test_paint_after_destroy_is_ignored(self, sim):
        adapter = InteractionAdapter(sim)
        sim.destroy()
        assert adapter.paint([(5, 5)]) == []
