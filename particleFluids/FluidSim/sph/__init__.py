# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides the vector and particle types, kernel functions, the
neighbor grid, boundary handling, time integration, and the
simulation step.
'''

from particleFluids.FluidSim.sph.vector2 import Vector2
from particleFluids.FluidSim.sph.particles import Particle
from particleFluids.FluidSim.sph.protocols import SimulationParameters, SimulationState
from particleFluids.FluidSim.sph.kernels import MullerKernels
from particleFluids.FluidSim.sph.spatialGrid import SpatialGrid
from particleFluids.FluidSim.sph.simulation import Simulation, pairwiseForces
