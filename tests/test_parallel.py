import numpy as np

from smval.utils.parallel import location_chunks, map_locations, resolve_workers


def test_location_chunks_cover_all_indices_once():
    chunks = location_chunks(10, 3)
    flat = [i for chunk in chunks for i in chunk]
    assert flat == list(range(10))
    assert len(chunks) == 4


def test_map_locations_writes_every_slot():
    out = np.full(101, -1.0)

    def fill(i: int) -> None:
        out[i] = i * 2.0

    map_locations(fill, out.size, workers=4, chunk_size=7)
    assert np.array_equal(out, np.arange(101) * 2.0)


def test_map_locations_propagates_errors():
    def boom(i: int) -> None:
        if i == 13:
            raise RuntimeError("bad location")

    try:
        map_locations(boom, 40, workers=3, chunk_size=4)
        assert False
    except RuntimeError as exc:
        assert "bad location" in str(exc)


def test_resolve_workers_defaults_to_cpu_count():
    assert resolve_workers(None) >= 1
    assert resolve_workers(3) == 3
    try:
        resolve_workers(0)
        assert False
    except ValueError:
        pass
