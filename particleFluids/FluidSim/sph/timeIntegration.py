# -- SPH Time Integration -- #

'''
Explicit Euler time integration for the particle set.

Update sequence per particle:
    v(t+dt) = v(t) + F(t) * (dt / rho)
    x(t+dt) = x(t) + v(t+dt) * dt

The force is divided by the particle density rather than its mass,
matching the density-scaled gravity term in the force pass.

A particle whose density is zero, negative or non-finite receives no
acceleration that step; its position still advances with the current
velocity.
'''

from __future__ import annotations

import math
from typing import Iterable, Protocol, Sequence

from particleFluids.FluidSim.sph.particles import Particle


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for time integration schemes.'''

    def integrate(
        self, particles: Sequence[Particle], indices: Iterable[int], dt: float
    ) -> None:
        '''
        Advance the given particles by one time step.

        Parameters:
        -----------
        particles : Sequence[Particle]
            Particle store
        indices : Iterable[int]
            Indices of the particles to advance
        dt : float
            Time step size
        '''
        ...


######################################################################
# -- Forward Euler Integrator -- #
######################################################################

class ForwardEuler:
    '''Fixed-step Euler integrator with a guard against zero density.'''

    def integrate(
        self, particles: Sequence[Particle], indices: Iterable[int], dt: float
    ) -> None:
        for i in indices:
            self.integrateParticle(particles[i], dt)

    def integrateParticle(self, p: Particle, dt: float) -> None:
        if p.density > 0.0 and math.isfinite(p.density):
            p.velocity = p.velocity.add(p.force.scale(dt / p.density))
        p.position = p.position.add(p.velocity.scale(dt))
