# -- Dam-Break Scenario -- #

'''
Rectangular dam-break column and mid-run particle injection.

Particles are laid out on a regular lattice filling the middle third
of the domain width, starting a fixed distance below the top edge
(y grows downward) and continuing down to the bottom of the domain.
The lattice is filled row by row and cut off at the target particle
count. Each particle gets a small random horizontal jitter so the
column does not stay perfectly stacked.

The injection batch uses the same layout with a slightly wider row
spacing and is appended to a running simulation without touching the
particles already there.
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from particleFluids.FluidSim import constants as const
from particleFluids.FluidSim.sph.particles import Particle
from particleFluids.FluidSim.sph.protocols import SimulationParameters
from particleFluids.FluidSim.sph.simulation import Simulation
from particleFluids.FluidSim.sph.vector2 import Vector2


######################################################################
# -- Dam-Break Layout -- #
######################################################################

@dataclass
class DamBreakLayout:
    '''
    Lattice geometry of a dam-break batch.

    Parameters:
    -----------
    startY : float
        y coordinate of the first row [px]
    leftFraction : float
        Left edge of the column as a fraction of the domain width
    rightFraction : float
        Right edge (inclusive) as a fraction of the domain width
    columnSpacing : float
        Horizontal lattice spacing in units of the kernel radius
    rowSpacing : float
        Vertical lattice spacing in units of the kernel radius
    jitter : float
        Width of the uniform horizontal jitter [px]
    '''

    startY: float = const.damBreakStartY
    leftFraction: float = const.damBreakLeftFraction
    rightFraction: float = const.damBreakRightFraction
    columnSpacing: float = const.damBreakColumnSpacing
    rowSpacing: float = const.damBreakRowSpacing
    jitter: float = const.damBreakJitter

    @classmethod
    def initial(cls) -> DamBreakLayout:
        '''Layout of the starting column.'''
        return cls()

    @classmethod
    def injection(cls) -> DamBreakLayout:
        '''Layout of a batch injected mid-run.'''
        return cls(rowSpacing=const.injectionRowSpacing)


######################################################################
# -- Particle Creation -- #
######################################################################

def damBreakPositions(params: SimulationParameters, layout: DamBreakLayout) -> np.ndarray:
    '''
    Candidate lattice positions of a dam-break batch, row by row.

    Rows run from startY while y < domainHeight; columns run from
    leftFraction * width up to and including rightFraction * width.

    Parameters:
    -----------
    params : SimulationParameters
        Simulation parameters (domain size, kernel radius)
    layout : DamBreakLayout
        Lattice geometry

    Returns:
    --------
    np.ndarray : Unjittered positions, shape (nRows * nColumns, 2)
    '''
    h = params.kernelRadius
    colStep = layout.columnSpacing * h
    rowStep = layout.rowSpacing * h

    xLeft = params.domainWidth * layout.leftFraction
    xRight = params.domainWidth * layout.rightFraction
    nColumns = max(0, math.floor((xRight - xLeft) / colStep + 1e-9) + 1)
    xCoords = xLeft + colStep * np.arange(nColumns)

    yCoords = np.arange(layout.startY, params.domainHeight, rowStep)

    xx, yy = np.meshgrid(xCoords, yCoords, indexing='xy')
    return np.column_stack([xx.ravel(), yy.ravel()])


def createDamBreak(
    params: SimulationParameters,
    layout: DamBreakLayout | None = None,
    rng: np.random.Generator | None = None,
    count: int | None = None,
) -> list[Particle]:
    '''
    Create a dam-break batch of particles at rest.

    Never returns more than the target count, however many lattice
    slots the domain provides.

    Parameters:
    -----------
    params : SimulationParameters
        Simulation parameters
    layout : DamBreakLayout | None
        Lattice geometry (defaults to the initial layout)
    rng : np.random.Generator | None
        Random generator for the jitter (defaults to a fresh one)
    count : int | None
        Target particle count (defaults to params.targetParticleCount)

    Returns:
    --------
    list[Particle] : New particles, row by row
    '''
    layout = layout or DamBreakLayout.initial()
    rng = rng if rng is not None else np.random.default_rng()
    target = params.targetParticleCount if count is None else count

    positions = damBreakPositions(params, layout)[:max(0, target)]
    jitter = (rng.random(len(positions)) - 0.5) * layout.jitter

    return [
        Particle(position=Vector2(float(x + dx), float(y)))
        for (x, y), dx in zip(positions, jitter)
    ]


######################################################################
# -- Scenario Creation -- #
######################################################################

def createDamBreakSimulation(
    params: SimulationParameters,
    rng: np.random.Generator | None = None,
) -> Simulation:
    '''
    Create a simulation seeded with the initial dam-break column.

    Parameters:
    -----------
    params : SimulationParameters
        Simulation parameters
    rng : np.random.Generator | None
        Random generator for the jitter

    Returns:
    --------
    Simulation : Ready-to-step simulation with its grid built
    '''
    particles = createDamBreak(params, DamBreakLayout.initial(), rng)
    return Simulation(params, particles)


def injectDamBreak(
    simulation: Simulation,
    rng: np.random.Generator | None = None,
) -> int:
    '''
    Append a fresh dam-break batch to a running simulation.

    The batch is bounded by the target count on its own, independent
    of how many particles the simulation already holds. The grid is
    rebuilt before returning.

    Parameters:
    -----------
    simulation : Simulation
        Running simulation
    rng : np.random.Generator | None
        Random generator for the jitter

    Returns:
    --------
    int : Number of particles added
    '''
    batch = createDamBreak(simulation.parameters, DamBreakLayout.injection(), rng)
    simulation.addParticles(batch)
    return len(batch)
