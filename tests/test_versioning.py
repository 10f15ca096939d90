from gravitation.data_models import Mass, PropagationFront


def _front(x, y, version):
    return PropagationFront(x=x, y=y, start_time=0.0, spacing=32, version=version,
                            type="creation", mass_change=0.0)


def test_versions_increase_and_snapshot_is_a_copy(versions):
    live = [Mass(96, 96, 1000)]
    first = versions.create_new_version("creation", 96, 96, 0.0, live)
    live[0].mass = 2000
    second = versions.create_new_version("modification", 96, 96, 1000.0, live)
    assert (first.version, second.version) == (1, 2)
    assert versions.history[0].masses[0].mass == 1000
    assert versions.history[1].masses[0].mass == 2000


def test_floor_lookup_and_version_zero_fallback(versions):
    live = [Mass(0, 0, 5)]
    versions.create_new_version("creation", 0, 0, 0.0, live)  # 1
    versions.create_new_version("modification", 0, 0, 1.0, live)  # 2
    versions.create_new_version("modification", 0, 0, 1.0, live)  # 3
    del versions.history[1]  # only 1 and 3 remain
    assert versions.get_masses_for_version(2, live) == list(versions.history[0].masses)
    assert versions.get_masses_for_version(99, live) == list(versions.history[-1].masses)

    live.append(Mass(32, 32, 7))
    fallback = versions.get_masses_for_version(0, live)
    assert [m.mass for m in fallback] == [5, 7]


def test_history_bound_and_repointing(versions):
    live = [Mass(0, 0, 1)]
    versions.create_new_version("creation", 0, 0, 0.0, live)
    versions.update_grid_point_version(0, 0, 1)
    for _ in range(50):
        versions.create_new_version("modification", 0, 0, 1.0, live)

    history = [e.version for e in versions.history]
    assert len(history) <= versions.max_versions
    assert history == sorted(history)
    assert versions.get_grid_version(0, 0) == history[0]
    allowed = {0, *history}
    assert set(versions.grid.flatten().tolist()) <= allowed


def test_front_stamping_is_monotone(versions):
    live = [Mass(384, 384, 1)]
    versions.create_new_version("creation", 384, 384, 0.0, live)
    versions.create_new_version("modification", 384, 384, 1.0, live)

    assert versions.update_grid_versions_for_front(_front(384, 384, 2), 0) == 1
    assert versions.get_grid_version(12, 12) == 2
    changed = versions.update_grid_versions_for_front(_front(384, 384, 1), 64)
    assert versions.get_grid_version(12, 12) == 2
    assert versions.get_grid_version(14, 12) == 1
    assert changed > 0


def test_front_for_evicted_version_stamps_oldest_survivor(versions):
    live = [Mass(0, 0, 1)]
    for _ in range(51):
        versions.create_new_version("modification", 0, 0, 1.0, live)
    oldest = versions.oldest_version()
    versions.update_grid_versions_for_front(_front(0, 0, 1), 100)
    assert versions.get_grid_version(0, 0) == oldest


def test_out_of_grid_lookups_are_zero(versions):
    assert versions.get_grid_version(-1, 0) == 0
    assert versions.get_grid_version(25, 0) == 0
    versions.update_grid_point_version(5000, 5000, 3)
    assert versions.grid.max() == 0
