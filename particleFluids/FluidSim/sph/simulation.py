# -- SPH Dam-Break Simulation -- #

'''
Particle simulation orchestrating one SPH time step.

Pressure comes from a linear equation of state, p = k * (rho - rho_0),
which goes negative below rest density; negative pressure is kept
and acts as a weak cohesion.

Algorithm per time step:
    1. Rebuild the neighbor grid from current positions
    2. Density by poly6 summation over the 3x3 cell neighborhood
       (self-contribution included), then pressure
    3. Pairwise pressure, viscosity and cohesion forces over the same
       neighborhood, plus density-scaled gravity
    4. Integrate (explicit Euler, force / density)
    5. Clamp and damp at the domain walls

Particles with a non-finite position are left out of the grid and
take no part in steps 2-5.

References:
-----------
Mueller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
'''

from __future__ import annotations

from typing import Iterable

import numpy as np

from particleFluids.FluidSim.sph.boundaryHandling import BoundaryHandler
from particleFluids.FluidSim.sph.kernels import MullerKernels, SphKernelSet
from particleFluids.FluidSim.sph.particles import (
    Particle,
    densitiesArray,
    kineticEnergy,
    maxSpeed,
    velocitiesArray,
)
from particleFluids.FluidSim.sph.protocols import SimulationParameters, SimulationState
from particleFluids.FluidSim.sph.spatialGrid import SpatialGrid
from particleFluids.FluidSim.sph.timeIntegration import ForwardEuler, TimeIntegrator
from particleFluids.FluidSim.sph.vector2 import Vector2


######################################################################
# -- Pairwise Forces -- #
######################################################################

def pairwiseForces(
    pi: Particle,
    pj: Particle,
    params: SimulationParameters,
    kernels: SphKernelSet,
) -> tuple[Vector2, Vector2, Vector2]:
    '''
    Pressure, viscosity and cohesion force exerted on pi by pj.

    With rij = x_j - x_i and r = |rij|:

        pressure  = rij/r * (-m (p_i + p_j) / (2 rho_j)) * spikyGrad * (h - r)^2
        viscosity = (v_j - v_i) * (mu m / rho_j) * viscLap * (h - r)
        cohesion  = rij/r * (-sigma * viscLap * (m / rho_j) * spikyGrad * (2h - r)^3)

    Pressure and viscosity act for epsilon < r < h, cohesion for
    epsilon < r < 2h. Pairs closer than epsilon contribute nothing.

    Parameters:
    -----------
    pi : Particle
        Particle receiving the force
    pj : Particle
        Neighbor exerting the force (density must be non-zero)
    params : SimulationParameters
        Simulation parameters
    kernels : SphKernelSet
        Kernel weights

    Returns:
    --------
    tuple[Vector2, Vector2, Vector2] : (pressure, viscosity, cohesion)
    '''
    pressure = Vector2()
    viscous = Vector2()
    cohesive = Vector2()

    rij = pj.position.sub(pi.position)
    r = rij.length()
    h = kernels.radius
    if r <= params.epsilon or r >= 2.0 * h:
        return pressure, viscous, cohesive

    direction = rij.normalized()
    mass = params.particleMass

    if r < h:
        c1 = (-mass * (pi.pressure + pj.pressure) / (2.0 * pj.density)) * kernels.pressureWeight(r)
        pressure = direction.scale(c1)

        c2 = (params.viscosity * mass / pj.density) * kernels.viscosityWeight(r)
        viscous = pj.velocity.sub(pi.velocity).scale(c2)

    c3 = -params.cohesion * (mass / pj.density) * kernels.cohesionWeight(r)
    cohesive = direction.scale(c3)

    return pressure, viscous, cohesive


######################################################################
# -- Simulation -- #
######################################################################

class Simulation:
    '''
    2D SPH simulation over an owned particle list.

    The grid, kernels, boundary handler and integrator are all held
    by the instance; there is no module-level state. step() can be
    called back-to-back with no minimum interval.

    Parameters:
    -----------
    params : SimulationParameters
        Simulation parameters (validated on construction)
    particles : Iterable[Particle] | None
        Initial particles (default: none)
    kernels : SphKernelSet | None
        Kernel set (defaults to MullerKernels at params.kernelRadius)
    boundaryHandler : BoundaryHandler | None
        Wall handler (defaults to the domain rectangle)
    integrator : TimeIntegrator | None
        Integrator (defaults to ForwardEuler)
    '''

    def __init__(
        self,
        params: SimulationParameters,
        particles: Iterable[Particle] | None = None,
        kernels: SphKernelSet | None = None,
        boundaryHandler: BoundaryHandler | None = None,
        integrator: TimeIntegrator | None = None,
    ) -> None:
        params.validate()
        self._params = params
        self._kernels = kernels or MullerKernels(params.kernelRadius)
        self._boundaryHandler = boundaryHandler or BoundaryHandler(
            domainWidth=params.domainWidth,
            domainHeight=params.domainHeight,
            particleRadius=params.particleRadius,
            damping=params.boundaryDamping,
        )
        self._integrator = integrator or ForwardEuler()

        self._particles: list[Particle] = list(particles) if particles is not None else []
        self._grid = SpatialGrid(
            params.domainWidth, params.domainHeight, self.cellSize
        )
        self._activeIndices: list[int] = []
        self._nDiverged = 0
        self._step = 0

        self.rebuildGrid()

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self) -> SimulationState:
        '''
        Advance one time step.

        Returns:
        --------
        SimulationState : Simulation state after the step
        '''
        self.rebuildGrid()
        self.computeDensityPressure()
        self.computeForces()
        self.integrate()

        self._step += 1
        return self.currentState

    def addParticles(self, batch: Iterable[Particle]) -> None:
        '''
        Append particles and rebuild the grid immediately.

        Existing particles are left untouched.

        Parameters:
        -----------
        batch : Iterable[Particle]
            New particles
        '''
        self._particles.extend(batch)
        self.rebuildGrid()

    ######################################################################
    # -- Grid -- #
    ######################################################################

    def rebuildGrid(self) -> None:
        '''
        Rebuild the neighbor grid from current positions.

        Particles with a non-finite coordinate are left out of the grid
        and stay in the particle list, or are removed from it first
        when params.pruneDiverged is set.
        '''
        params = self._params

        if params.pruneDiverged:
            kept = [p for p in self._particles if p.hasFinitePosition()]
            nPruned = len(self._particles) - len(kept)
            self._particles[:] = kept
        else:
            nPruned = 0

        self._grid.rebuild(
            self._particles, params.domainWidth, params.domainHeight, self.cellSize
        )
        self._activeIndices = self._grid.activeIndices()
        self._nDiverged = nPruned + len(self._grid.droppedIndices)

    ######################################################################
    # -- Density & Pressure -- #
    ######################################################################

    def computeDensityPressure(self) -> None:
        '''
        Compute density and pressure for every gridded particle.

        rho_i = sum_j m * poly6 * (h^2 - r_ij^2)^3    for r_ij^2 < h^2
        p_i   = k * (rho_i - rho_0)

        The sum runs over the 3x3 cell neighborhood and includes j = i.
        '''
        particles = self._particles
        grid = self._grid
        kernels = self._kernels
        mass = self._params.particleMass
        gasConstant = self._params.gasConstant
        restDensity = self._params.restDensity

        for cellIndex in grid.nonEmptyCells():
            neighborBuckets = grid.neighborsOf(cellIndex)
            for i in grid.bucket(cellIndex):
                pi = particles[i]
                density = 0.0
                for bucket in neighborBuckets:
                    for j in bucket:
                        r2 = particles[j].position.sub(pi.position).len2()
                        density += mass * kernels.densityWeight(r2)
                pi.density = density
                pi.pressure = gasConstant * (density - restDensity)

    ######################################################################
    # -- Forces -- #
    ######################################################################

    def computeForces(self) -> None:
        '''
        Accumulate the total force on every gridded particle.

        F_i = sum_j (pressure + viscosity + cohesion)_ij + g * rho_i

        Self-pairs are skipped. Gravity is scaled by density so that the
        integrator's force / density gives the gravity acceleration.
        '''
        particles = self._particles
        grid = self._grid
        params = self._params
        kernels = self._kernels
        gravity = params.gravity

        for cellIndex in grid.nonEmptyCells():
            neighborBuckets = grid.neighborsOf(cellIndex)
            for i in grid.bucket(cellIndex):
                pi = particles[i]
                fPressure = Vector2()
                fViscosity = Vector2()
                fCohesion = Vector2()
                for bucket in neighborBuckets:
                    for j in bucket:
                        if j == i:
                            continue
                        press, visc, coh = pairwiseForces(pi, particles[j], params, kernels)
                        fPressure = fPressure.add(press)
                        fViscosity = fViscosity.add(visc)
                        fCohesion = fCohesion.add(coh)

                fGravity = gravity.scale(pi.density)
                pi.force = fPressure.add(fViscosity).add(fGravity).add(fCohesion)

    ######################################################################
    # -- Integration -- #
    ######################################################################

    def integrate(self) -> None:
        '''Advance gridded particles by one timestep and apply the walls.'''
        self._integrator.integrate(
            self._particles, self._activeIndices, self._params.timeStep
        )
        self._boundaryHandler.enforceBoundary(self._particles, self._activeIndices)

    ######################################################################
    # -- Properties -- #
    ######################################################################

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        active = self._activeIndices
        velocities = velocitiesArray(self._particles, active)
        densities = densitiesArray(self._particles, active)

        return SimulationState(
            step=self._step,
            time=self._step * self._params.timeStep,
            nParticles=len(self._particles),
            nActive=len(active),
            nDiverged=self._nDiverged,
            kineticEnergy=kineticEnergy(velocities, self._params.particleMass),
            maxVelocity=maxSpeed(velocities),
            meanDensity=float(np.mean(densities)) if len(densities) else 0.0,
            maxDensity=float(np.max(densities)) if len(densities) else 0.0,
        )

    @property
    def particles(self) -> list[Particle]:
        '''The owned particle list.'''
        return self._particles

    @property
    def grid(self) -> SpatialGrid:
        return self._grid

    @property
    def kernels(self) -> SphKernelSet:
        return self._kernels

    @property
    def parameters(self) -> SimulationParameters:
        return self._params

    @property
    def cellSize(self) -> float:
        '''Grid cell size, twice the kernel radius.'''
        return 2.0 * self._kernels.radius

    @property
    def activeIndices(self) -> list[int]:
        '''Indices of particles placed in the grid at the last rebuild.'''
        return list(self._activeIndices)

    @property
    def stepCount(self) -> int:
        return self._step

    @property
    def time(self) -> float:
        '''Simulated time, stepCount * timeStep.'''
        return self._step * self._params.timeStep
