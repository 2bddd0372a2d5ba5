# -- Export Package -- #

'''
Data export utilities for SPH simulation results.

Exports frame data as JSON for an external particle renderer.
'''

from particleFluids.FluidSim.export.frameExporter import FrameExporter
