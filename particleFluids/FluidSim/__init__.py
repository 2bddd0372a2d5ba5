# -- FluidSim Package -- #

'''
2D Smoothed Particle Hydrodynamics (SPH) dam-break simulation.

A column of particles released under gravity, with pressure,
viscosity and cohesion forces, grid-based neighbor search, and
lossy reflective walls.
'''

__version__ = '0.1.0'

from particleFluids.FluidSim.runner import FluidSimRunner
from particleFluids.FluidSim.sph.protocols import SimulationParameters
from particleFluids.FluidSim.sph.simulation import Simulation
from particleFluids.FluidSim.export.frameExporter import FrameExporter
