# -- SPH Particle -- #

'''
Particle entity and array helpers for the SPH simulation.

A Particle carries its own position, velocity and force vectors plus
the per-step density and pressure. The simulation owns the list of
particles; the spatial grid refers to them by list index only.

The helper functions gather per-particle fields into NumPy arrays for
diagnostics and export.
'''

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from particleFluids.FluidSim.sph.vector2 import Vector2


@dataclass
class Particle:
    '''
    Single SPH particle.

    Density, pressure and force are derived quantities recomputed every
    step; position and velocity persist and are advanced by integration.

    Parameters:
    -----------
    position : Vector2
        Particle position [px]
    velocity : Vector2
        Particle velocity [px/s]
    force : Vector2
        Accumulated force for the current step
    density : float
        SPH density estimate
    pressure : float
        Pressure from the equation of state (may be negative)
    '''

    position: Vector2 = field(default_factory=Vector2)
    velocity: Vector2 = field(default_factory=Vector2)
    force: Vector2 = field(default_factory=Vector2)
    density: float = 0.0
    pressure: float = 0.0

    def hasFinitePosition(self) -> bool:
        return self.position.isFinite()


######################################################################
# -- Array Views -- #
######################################################################

def positionsArray(
    particles: Sequence[Particle], indices: Sequence[int] | None = None
) -> np.ndarray:
    '''
    Gather particle positions into an array.

    Parameters:
    -----------
    particles : Sequence[Particle]
        Particle store
    indices : Sequence[int] | None
        Subset of particle indices (default: all particles)

    Returns:
    --------
    np.ndarray : Positions, shape (N, 2)
    '''
    selected = particles if indices is None else [particles[i] for i in indices]
    if not selected:
        return np.zeros((0, 2))
    return np.array([[p.position.x, p.position.y] for p in selected], dtype=np.float64)


def velocitiesArray(
    particles: Sequence[Particle], indices: Sequence[int] | None = None
) -> np.ndarray:
    '''Gather particle velocities into an array of shape (N, 2).'''
    selected = particles if indices is None else [particles[i] for i in indices]
    if not selected:
        return np.zeros((0, 2))
    return np.array([[p.velocity.x, p.velocity.y] for p in selected], dtype=np.float64)


def densitiesArray(
    particles: Sequence[Particle], indices: Sequence[int] | None = None
) -> np.ndarray:
    '''Gather particle densities into an array of shape (N,).'''
    selected = particles if indices is None else [particles[i] for i in indices]
    return np.array([p.density for p in selected], dtype=np.float64)


def kineticEnergy(velocities: np.ndarray, mass: float) -> float:
    '''
    Total kinetic energy for particles of uniform mass.

    KE = (1/2) * m * sum_i |v_i|^2

    Parameters:
    -----------
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    mass : float
        Mass of every particle

    Returns:
    --------
    float : Kinetic energy
    '''
    if len(velocities) == 0:
        return 0.0
    speedsSq = np.sum(velocities * velocities, axis=1)
    return float(0.5 * mass * np.sum(speedsSq))


def maxSpeed(velocities: np.ndarray) -> float:
    '''Largest velocity magnitude, 0 for an empty set.'''
    if len(velocities) == 0:
        return 0.0
    return float(np.max(np.linalg.norm(velocities, axis=1)))
