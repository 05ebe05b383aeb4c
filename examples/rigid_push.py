# examples/rigid_push.py
from rope_sim import World, RigidBody, Circle, Rectangle

world = World()

disc = RigidBody(shape=Circle(radius=25.0), mass=10.0)
plank = RigidBody(shape=Rectangle(width=4.0, height=1.0), mass=3.0, position=(10.0, 0.0))
world.add_body(disc)
world.add_body(plank)

# push the disc on its rim and the plank on its end
world.apply_impulse(disc.id, (0.0, 25.0), (-50.0, 0.0))
world.apply_impulse(plank.id, (12.0, 0.0), (0.0, 6.0))

for body in world.enumerate_bodies():
    print(body.id, type(body.shape).__name__,
          "I:", body.inertia, "v:", body.velocity, "omega:", body.angular_velocity)
