"""Resolution and normalization are pure; parallel callers see serial results."""

import random
from concurrent.futures import ThreadPoolExecutor
from itertools import product

from tiergate_engine.entitlements.capabilities import CAPABILITIES
from tiergate_engine.entitlements.plans import PLAN_ORDER, get_policy_table
from tiergate_engine.entitlements.resolver import check_adult_content_access, resolve
from tiergate_engine.playlist.normalizer import apply_reorder, normalize

WORKERS = 8


def _resolve_cases():
    quantities = [0, 1, 49, 50, 51, 199, 200, 201, 499, 500, 501, 10_000]
    cases = []
    for plan, name in product(PLAN_ORDER, CAPABILITIES):
        if CAPABILITIES[name].is_quantity:
            cases.extend((plan, name, quantity) for quantity in quantities)
        else:
            cases.append((plan, name, None))
    return cases


def _playlists(count, seed=7):
    rng = random.Random(seed)
    playlists = []
    for n in range(count):
        size = rng.randint(0, 60)
        positions = rng.sample(range(size * 10 + 1), size)
        playlists.append([(f"vid_{n}_{i}", pos) for i, pos in enumerate(positions)])
    return playlists


class TestParallelResolve:
    def test_matches_serial(self):
        cases = _resolve_cases() * 20
        serial = [resolve(plan, name, quantity) for plan, name, quantity in cases]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            parallel = list(pool.map(lambda case: resolve(*case), cases))

        assert parallel == serial

    def test_cold_table_built_consistently(self):
        get_policy_table.cache_clear()
        cases = _resolve_cases()

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            parallel = list(pool.map(lambda case: resolve(*case), cases))

        assert parallel == [resolve(*case) for case in cases]

    def test_adult_content_matches_serial(self):
        cases = [
            (plan, verified, age)
            for plan, verified, age in product(PLAN_ORDER, (True, False), (15, 17, 18, 20, 65))
        ] * 20
        serial = [check_adult_content_access(p, is_age_verified=v, age=a) for p, v, a in cases]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            parallel = list(
                pool.map(lambda c: check_adult_content_access(c[0], is_age_verified=c[1], age=c[2]), cases)
            )

        assert parallel == serial


class TestParallelNormalize:
    def test_matches_serial(self):
        playlists = _playlists(200)
        serial = [normalize(items) for items in playlists]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            parallel = list(pool.map(normalize, playlists))

        assert parallel == serial
        for result in parallel:
            assert [item.position for item in result] == list(range(len(result)))

    def test_shared_input_not_mutated(self):
        items = _playlists(1, seed=11)[0]
        snapshot = list(items)

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(lambda _: normalize(items), range(100)))

        assert items == snapshot
        assert all(result == results[0] for result in results)

    def test_reorder_matches_serial(self):
        current = normalize(_playlists(1, seed=3)[0] or [("vid_only", 0)])
        moves = [[(current[-1].item_id, 0)], [(current[0].item_id, len(current) - 1)]] * 50
        serial = [apply_reorder(current, move) for move in moves]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            parallel = list(pool.map(lambda move: apply_reorder(current, move), moves))

        assert parallel == serial
