import threading

import numpy as np

import fourd
from fourd.config import LayoutConfig
from fourd.engine import LayoutEngine


def test_engine_exposes_the_mutation_api():
    engine = LayoutEngine(LayoutConfig(seed=1))
    a, b, c = engine.add_vertex(), engine.add_vertex(), engine.add_vertex()
    ab = engine.add_edge(a, b)
    engine.add_edge(b, c)
    assert str(engine) == "|V|: 3,  |E|: 2"
    engine.remove_edge(ab)
    engine.remove_vertex(c)
    assert str(engine) == "|V|: 2,  |E|: 0"
    engine.clear()
    assert str(engine) == "|V|: 0,  |E|: 0"
    assert engine.frame == 0


def test_step_counts_frames_and_records_center():
    engine = LayoutEngine(LayoutConfig(seed=4))
    vertices = [engine.add_vertex() for _ in range(4)]
    expected = np.mean([v.position for v in vertices], axis=0)
    returned = engine.step()
    assert engine.frame == 1
    assert np.allclose(returned, expected)
    assert np.allclose(engine.center_of_mass, expected)
    returned[0] = 1e9
    assert engine.center_of_mass[0] != 1e9


def test_positions_are_plain_tuples():
    engine = LayoutEngine()
    vertex = engine.add_vertex()
    positions = engine.positions()
    assert list(positions) == [vertex.id]
    assert all(isinstance(c, float) for c in positions[vertex.id])


def test_mutation_from_another_thread_waits_for_the_lock():
    engine = LayoutEngine()
    added = []

    def worker():
        added.append(engine.add_vertex())

    with engine.locked():
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join(timeout=0.1)
        assert thread.is_alive()
        assert added == []
    thread.join(timeout=5)
    assert len(added) == 1


def test_package_version():
    assert fourd.__version__ == "0.1.0"
    assert LayoutEngine.version == fourd.__version__
