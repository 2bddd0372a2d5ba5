# -- Default Constants for the SPH Dam-Break Simulation -- #

'''
Default physical and numerical constants for the 2D SPH simulation.

Values are in screen units: lengths in pixels, y grows downward, so
gravity points along +y. The gravity magnitude and cohesion coefficient
are large because the domain is measured in pixels rather than metres.

References:
-----------
Mueller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
'''

import math

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Rest density used by the equation of state
restDensity: float = 1000.0

# Gas stiffness constant for p = k * (rho - rho_0)
gasConstant: float = 2000.0

# Mass of every particle (uniform)
particleMass: float = 65.0

# Viscosity coefficient
viscosity: float = 250.0

# Cohesion (surface tension) coefficient SIGMA
cohesion: float = 1.0e8

# Gravity vector components (screen coordinates, +y is down)
gravityX: float = 0.0
gravityY: float = 117600.0        # 12000 * 9.8

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Kernel radius h; the grid cell size is 2h
kernelRadius: float = 16.0

# Fixed integration timestep
timeStep: float = 0.0008

# Velocity multiplier applied at a wall (negative: reflect and damp)
boundaryDamping: float = -0.5

# Minimum separation before a pair direction is normalized
epsilon: float = 0.001

# Particle radius, used for the far-wall clamp
particleRadius: float = 5.0

#--------------------------------------------------------------------#
# -- Scenario Defaults -- #
#--------------------------------------------------------------------#

# Particles per dam-break batch
targetParticleCount: int = 1000

# Default domain extent [px]
domainWidth: float = 1200.0
domainHeight: float = 800.0

# Dam-break layout: first row height and spacing factors (times h)
damBreakStartY: float = 60.0
damBreakColumnSpacing: float = 0.9
damBreakRowSpacing: float = 0.9
injectionRowSpacing: float = 0.95

# Horizontal extent of the dam as fractions of the domain width
damBreakLeftFraction: float = 2.0 / 6.0
damBreakRightFraction: float = 4.0 / 6.0

# Horizontal jitter amplitude (uniform in [-jitter/2, jitter/2))
damBreakJitter: float = 1.0

#--------------------------------------------------------------------#
# -- Kernel Normalisation -- #
#--------------------------------------------------------------------#

def poly6Constant(h: float) -> float:
    '''Poly6 normalisation 315 / (64 pi h^9).'''
    return 315.0 / (64.0 * math.pi * h ** 9)


def spikyGradientConstant(h: float) -> float:
    '''Spiky kernel gradient normalisation -45 / (pi h^6).'''
    return -45.0 / (math.pi * h ** 6)


def viscosityLaplacianConstant(h: float) -> float:
    '''Viscosity kernel laplacian normalisation 45 / (pi h^6).'''
    return 45.0 / (math.pi * h ** 6)
