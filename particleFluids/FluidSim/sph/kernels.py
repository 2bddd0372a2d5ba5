# -- SPH Smoothing Kernels -- #

'''
Smoothing kernels for density, pressure and viscosity estimation.

Implements the kernel set of Mueller et al. (2003):

    poly6 (density):
        W(r, h) = 315 / (64 pi h^9) * (h^2 - r^2)^3      for r < h

    spiky gradient (pressure):
        grad W(r, h) = -45 / (pi h^6) * (h - r)^2        for r < h

    viscosity laplacian (viscosity):
        lap W(r, h) = 45 / (pi h^6) * (h - r)            for r < h

The cohesion term reuses the spiky and viscosity constants over a
doubled support of 2h.

The normalisation constants depend only on the kernel radius and are
recomputed whenever the radius is changed.

References:
-----------
Mueller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
'''

from __future__ import annotations

from typing import Protocol

from particleFluids.FluidSim import constants as const


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SphKernelSet(Protocol):
    '''Protocol for the kernel weights used by the simulation passes.'''

    @property
    def radius(self) -> float:
        '''Kernel radius h.'''
        ...

    def densityWeight(self, r2: float) -> float:
        '''Density kernel value for squared distance r2.'''
        ...

    def pressureWeight(self, r: float) -> float:
        '''Scalar pressure-gradient kernel value at distance r.'''
        ...

    def viscosityWeight(self, r: float) -> float:
        '''Scalar viscosity-laplacian kernel value at distance r.'''
        ...

    def cohesionWeight(self, r: float) -> float:
        '''Scalar cohesion kernel value at distance r (support 2h).'''
        ...


######################################################################
# -- Mueller Kernel Set -- #
######################################################################

class MullerKernels:
    '''
    Poly6, spiky-gradient and viscosity-laplacian kernels.

    Range checks for the pressure, viscosity and cohesion weights are
    left to the caller, which also applies the minimum separation guard.
    The density weight checks r^2 < h^2 itself.

    Parameters:
    -----------
    radius : float
        Kernel radius h
    '''

    def __init__(self, radius: float = const.kernelRadius) -> None:
        self.radius = radius

    @property
    def radius(self) -> float:
        '''Kernel radius h.'''
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = value
        self._radiusSq = value * value
        self._poly6 = const.poly6Constant(value)
        self._spikyGradient = const.spikyGradientConstant(value)
        self._viscosityLaplacian = const.viscosityLaplacianConstant(value)

    @property
    def radiusSq(self) -> float:
        return self._radiusSq

    @property
    def poly6(self) -> float:
        '''Poly6 normalisation 315 / (64 pi h^9).'''
        return self._poly6

    @property
    def spikyGradient(self) -> float:
        '''Spiky gradient normalisation -45 / (pi h^6).'''
        return self._spikyGradient

    @property
    def viscosityLaplacian(self) -> float:
        '''Viscosity laplacian normalisation 45 / (pi h^6).'''
        return self._viscosityLaplacian

    def densityWeight(self, r2: float) -> float:
        '''
        Poly6 kernel value for a squared distance.

        Parameters:
        -----------
        r2 : float
            Squared distance between the particles

        Returns:
        --------
        float : poly6 * (h^2 - r^2)^3, or 0 outside the support
        '''
        if r2 >= self._radiusSq:
            return 0.0
        diff = self._radiusSq - r2
        return self._poly6 * diff * diff * diff

    def pressureWeight(self, r: float) -> float:
        diff = self._radius - r
        return self._spikyGradient * diff * diff

    def viscosityWeight(self, r: float) -> float:
        return self._viscosityLaplacian * (self._radius - r)

    def cohesionWeight(self, r: float) -> float:
        '''
        Long-range cohesion weight over a support of 2h.

        viscosityLaplacian * spikyGradient * (2h - r)^3
        '''
        diff = 2.0 * self._radius - r
        return self._viscosityLaplacian * self._spikyGradient * diff * diff * diff
