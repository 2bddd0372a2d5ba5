# -- Particle Fluids Package -- #

'''
Master package for the particle fluids toolkit.

Domain-specific sub-packages:
    - FluidSim: 2D SPH dam-break simulation (density, pressure,
      viscosity, cohesion, gravity) with a headless runner and
      JSON frame export
'''
