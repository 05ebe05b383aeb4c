# examples/bouncing_particle.py
from rope_sim import World

world = World(gravity=(0.0, -9.81), dt=1/240, integrator="euler", bounds=(2.0, 2.0))

ball = world.create_particle(position=(0.0, 1.5), mass=1.0, radius=0.1, velocity=(1.5, 0.0))

t_end = 3.0
while world.time < t_end:
    world.advance_tick()

state = world.get_particle(ball)
print("t:", world.time)
print("pos:", state.position)
print("vel:", state.velocity)
