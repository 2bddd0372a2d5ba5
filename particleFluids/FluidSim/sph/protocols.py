# -- SPH Simulation Protocols -- #

'''
Configuration and result dataclasses for the SPH simulation.

Defines the simulation parameters (SimulationParameters), the per-step
diagnostic snapshot (SimulationState), and the solver protocol the
runner drives.
'''

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Protocol, TYPE_CHECKING

from particleFluids.FluidSim import constants as const
from particleFluids.FluidSim.sph.vector2 import Vector2

if TYPE_CHECKING:
    from particleFluids.FluidSim.sph.particles import Particle


######################################################################
# -- Simulation Parameters -- #
######################################################################

@dataclass
class SimulationParameters:
    '''
    Fixed parameters of an SPH simulation.

    Lengths are in pixels with y growing downward. The kernel
    normalisation constants live on the simulation's kernel set, built
    from kernelRadius when the simulation is constructed.

    Parameters:
    -----------
    restDensity : float
        Rest density rho_0 of the equation of state
    gasConstant : float
        Stiffness k in p = k * (rho - rho_0)
    kernelRadius : float
        Kernel radius h; grid cells are 2h wide
    particleMass : float
        Mass of every particle
    viscosity : float
        Viscosity coefficient
    timeStep : float
        Fixed integration timestep
    boundaryDamping : float
        Velocity multiplier at a wall, in [-1, 0]
    cohesion : float
        Cohesion (surface tension) coefficient SIGMA
    gravity : Vector2
        Gravity vector (scaled by density in the force pass)
    particleRadius : float
        Particle radius, subtracted from the far walls
    targetParticleCount : int
        Particles per dam-break batch
    domainWidth : float
        Domain extent along x
    domainHeight : float
        Domain extent along y
    epsilon : float
        Minimum pair separation for the pairwise force terms
    pruneDiverged : bool
        Remove particles with non-finite positions from the particle
        list at the next rebuild instead of keeping them inert
    '''

    restDensity: float = const.restDensity
    gasConstant: float = const.gasConstant
    kernelRadius: float = const.kernelRadius
    particleMass: float = const.particleMass
    viscosity: float = const.viscosity
    timeStep: float = const.timeStep
    boundaryDamping: float = const.boundaryDamping
    cohesion: float = const.cohesion
    gravity: Vector2 = field(
        default_factory=lambda: Vector2(const.gravityX, const.gravityY)
    )
    particleRadius: float = const.particleRadius
    targetParticleCount: int = const.targetParticleCount
    domainWidth: float = const.domainWidth
    domainHeight: float = const.domainHeight
    epsilon: float = const.epsilon
    pruneDiverged: bool = False

    @property
    def cellSize(self) -> float:
        '''Grid cell size 2h.'''
        return 2.0 * self.kernelRadius

    def validate(self) -> None:
        '''
        Check parameter ranges.

        Raises:
        -------
        ValueError : If any parameter is outside its valid range
        '''
        positive = {
            'kernelRadius': self.kernelRadius,
            'particleMass': self.particleMass,
            'timeStep': self.timeStep,
            'domainWidth': self.domainWidth,
            'domainHeight': self.domainHeight,
        }
        for name, value in positive.items():
            if not value > 0.0:
                raise ValueError(f'{name} must be positive, got {value}')

        if not -1.0 <= self.boundaryDamping <= 0.0:
            raise ValueError(
                f'boundaryDamping must be in [-1, 0], got {self.boundaryDamping}'
            )
        if self.particleRadius < 0.0:
            raise ValueError(f'particleRadius must be >= 0, got {self.particleRadius}')
        if self.particleRadius >= min(self.domainWidth, self.domainHeight):
            raise ValueError('particleRadius must be smaller than the domain')
        if self.targetParticleCount < 0:
            raise ValueError(
                f'targetParticleCount must be >= 0, got {self.targetParticleCount}'
            )
        if self.epsilon < 0.0:
            raise ValueError(f'epsilon must be >= 0, got {self.epsilon}')

    def toDict(self) -> dict:
        '''Plain-dict form for export (gravity as [x, y]).'''
        data = asdict(self)
        data['gravity'] = [self.gravity.x, self.gravity.y]
        return data

    ######################################################################
    # -- Presets -- #
    ######################################################################

    @classmethod
    def reference(cls) -> SimulationParameters:
        '''
        Reference dam break.

        1200 x 800 px domain, 1000 particles per batch.
        '''
        return cls()

    @classmethod
    def small(cls) -> SimulationParameters:
        '''
        Small dam break for quick runs and tests.

        600 x 400 px domain, 200 particles per batch.
        '''
        return cls(
            domainWidth=600.0,
            domainHeight=400.0,
            targetParticleCount=200,
        )

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationParameters:
        '''
        Load parameters from a JSON file.

        Reads the 'domain', 'fluid', 'sph' and 'scenario' sections;
        missing keys keep their defaults.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationParameters : Loaded and validated parameters

        Raises:
        -------
        ValueError : If a loaded value is out of range
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data)

    @classmethod
    def fromDict(cls, data: dict) -> SimulationParameters:
        '''Build parameters from the sectioned dict used by fromJson.'''
        domainSection = data.get('domain', {})
        fluidSection = data.get('fluid', {})
        sphSection = data.get('sph', {})
        scenarioSection = data.get('scenario', {})

        gravity = fluidSection.get('gravity', [const.gravityX, const.gravityY])

        params = cls(
            restDensity=fluidSection.get('restDensity', const.restDensity),
            gasConstant=fluidSection.get('gasConstant', const.gasConstant),
            particleMass=fluidSection.get('particleMass', const.particleMass),
            viscosity=fluidSection.get('viscosity', const.viscosity),
            cohesion=fluidSection.get('cohesion', const.cohesion),
            gravity=Vector2(float(gravity[0]), float(gravity[1])),
            kernelRadius=sphSection.get('kernelRadius', const.kernelRadius),
            timeStep=sphSection.get('timeStep', const.timeStep),
            boundaryDamping=sphSection.get('boundaryDamping', const.boundaryDamping),
            particleRadius=sphSection.get('particleRadius', const.particleRadius),
            epsilon=sphSection.get('epsilon', const.epsilon),
            pruneDiverged=sphSection.get('pruneDiverged', False),
            domainWidth=domainSection.get('width', const.domainWidth),
            domainHeight=domainSection.get('height', const.domainHeight),
            targetParticleCount=scenarioSection.get(
                'targetParticleCount', const.targetParticleCount
            ),
        )
        params.validate()
        return params


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Snapshot of the simulation after a step.

    Density and velocity statistics cover active particles only (those
    placed in the grid this step).

    Parameters:
    -----------
    step : int
        Number of completed steps
    time : float
        Simulated time, step * timeStep
    nParticles : int
        Particles in the particle list
    nActive : int
        Particles placed in the grid this step
    nDiverged : int
        Particles skipped for non-finite positions
    kineticEnergy : float
        Total kinetic energy of active particles
    maxVelocity : float
        Largest active particle speed
    meanDensity : float
        Mean active particle density
    maxDensity : float
        Largest active particle density
    '''

    step: int
    time: float
    nParticles: int
    nActive: int
    nDiverged: int
    kineticEnergy: float
    maxVelocity: float
    meanDensity: float
    maxDensity: float


######################################################################
# -- Solver Protocol -- #
######################################################################

class SphSolver(Protocol):
    '''Protocol for a steppable particle simulation.'''

    def step(self) -> SimulationState:
        '''Advance one time step and return the new state.'''
        ...

    def addParticles(self, batch: list[Particle]) -> None:
        '''Append particles and rebuild the neighbor grid.'''
        ...

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        ...

    @property
    def particles(self) -> list[Particle]:
        '''Access the particle list.'''
        ...
