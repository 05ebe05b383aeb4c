"""
Microbenchmark: time per tick vs rope length.
Run:
  python benchmarks/bench_ticks.py
"""
import time
import numpy as np
from rope_sim import World, Profiler


def run(n: int, ticks: int = 300, integrator: str = "verlet"):
    prof = Profiler()
    world = World(
        dt=1/60,
        iterations=4,
        integrator=integrator,
        gravity=(0.0, -9.81),
        bounds=(50.0, 50.0),
        profiler=prof,
    )

    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)

    # one long rope with a little jitter so segments start stretched
    ids = []
    for i in range(n):
        x = 0.1 * i + 0.01 * float(rng.normal())
        y = 10.0 + 0.01 * float(rng.normal())
        ids.append(world.create_particle((x, y), mass=1.0, radius=0.05, friction=0.99))
    for a, b in zip(ids, ids[1:]):
        world.create_constraint(a, b, rest_length=0.1)

    # warmup
    for _ in range(30):
        world.advance_tick()
    prof.reset()

    t0 = time.perf_counter()
    for _ in range(ticks):
        world.advance_tick()
    t1 = time.perf_counter()

    per_tick = (t1 - t0) / ticks
    return per_tick, prof.stats.summary()


if __name__ == "__main__":
    for integrator in ["verlet", "euler"]:
        print(integrator)
        for n in [10, 50, 100, 250, 500]:
            per_tick, summary = run(n, integrator=integrator)
            print(f"N={n:4d}  tick={1e3*per_tick:8.3f} ms  ticks/s={1/per_tick:8.1f}")
            for k in ["forces", "integrate", "solve", "bounds"]:
                if k in summary:
                    print(" ", k, summary[k])
            print()
