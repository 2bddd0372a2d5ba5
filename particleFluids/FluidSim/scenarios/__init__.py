# -- Simulation Scenarios Package -- #

'''
Pre-configured initial conditions for the SPH simulation.

Each scenario provides a particle layout and helpers to build a
ready-to-step simulation from it.
'''

from particleFluids.FluidSim.scenarios.damBreak import (
    DamBreakLayout,
    createDamBreak,
    createDamBreakSimulation,
    injectDamBreak,
)
