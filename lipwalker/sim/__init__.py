"""Physical state containers for the pendulum simulation."""
