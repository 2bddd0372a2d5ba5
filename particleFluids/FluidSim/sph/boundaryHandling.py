# -- SPH Boundary Conditions -- #

'''
Reflective, lossy walls for a rectangular domain.

After integration each particle is checked against the four walls.
A particle past a wall is clamped back onto it and the velocity
component normal to that wall is multiplied by the (negative) damping
coefficient, which reverses and shrinks it:

    x < 0                          ->  x = 0,                vx *= damping
    x > width - particleRadius     ->  x = width - radius,   vx *= damping
    y < 0                          ->  y = 0,                vy *= damping
    y > height - particleRadius    ->  y = height - radius,  vy *= damping

The near walls clamp at 0 and the far walls at extent minus the
particle radius, so a disc drawn at the position stays on screen.
'''

from __future__ import annotations

from typing import Iterable, Sequence

from particleFluids.FluidSim.sph.particles import Particle


class BoundaryHandler:
    '''
    Clamp-and-damp boundary for the rectangle [0, width] x [0, height].

    Parameters:
    -----------
    domainWidth : float
        Domain extent along x
    domainHeight : float
        Domain extent along y
    particleRadius : float
        Particle radius subtracted from the far walls
    damping : float
        Velocity multiplier applied on contact (e.g. -0.5)
    '''

    def __init__(
        self,
        domainWidth: float,
        domainHeight: float,
        particleRadius: float,
        damping: float,
    ) -> None:
        self._xMax = domainWidth - particleRadius
        self._yMax = domainHeight - particleRadius
        self._damping = damping

    def enforceBoundary(
        self, particles: Sequence[Particle], indices: Iterable[int]
    ) -> None:
        '''
        Apply the wall clamp to the given particles.

        Each wall is tested once per call, so a velocity component is
        damped at most once per wall per step.

        Parameters:
        -----------
        particles : Sequence[Particle]
            Particle store
        indices : Iterable[int]
            Indices of the particles to constrain
        '''
        for i in indices:
            self.enforceParticle(particles[i])

    def enforceParticle(self, p: Particle) -> None:
        pos = p.position
        vel = p.velocity

        if pos.x < 0.0:
            pos.x = 0.0
            vel.x *= self._damping
        if pos.x > self._xMax:
            pos.x = self._xMax
            vel.x *= self._damping
        if pos.y < 0.0:
            pos.y = 0.0
            vel.y *= self._damping
        if pos.y > self._yMax:
            pos.y = self._yMax
            vel.y *= self._damping
