# -- 2D Vector Value Type -- #

'''
Small 2D vector used for particle positions, velocities and forces.

Every operation returns a new Vector2; the x and y fields stay
assignable so boundary clamps can overwrite a single component.
'''

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass
class Vector2:
    '''
    Two-component vector with value semantics.

    Parameters:
    -----------
    x : float
        Horizontal component
    y : float
        Vertical component (screen coordinates, +y is down)
    '''

    x: float = 0.0
    y: float = 0.0

    def add(self, v: Vector2) -> Vector2:
        return Vector2(self.x + v.x, self.y + v.y)

    def sub(self, v: Vector2) -> Vector2:
        return Vector2(self.x - v.x, self.y - v.y)

    def scale(self, s: float) -> Vector2:
        return Vector2(self.x * s, self.y * s)

    def len2(self) -> float:
        '''Squared length, for range checks without a square root.'''
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.sqrt(self.len2())

    def normalized(self) -> Vector2:
        '''
        Unit vector in the same direction.

        Not guarded: a zero vector gives nan/inf components instead of
        raising, so callers must check the length first.

        Returns:
        --------
        Vector2 : self / |self|
        '''
        length = np.float64(self.length())
        with np.errstate(divide='ignore', invalid='ignore'):
            return Vector2(
                float(np.float64(self.x) / length),
                float(np.float64(self.y) / length),
            )

    def isFinite(self) -> bool:
        '''True when neither component is nan or inf.'''
        return math.isfinite(self.x) and math.isfinite(self.y)

    def toArray(self) -> np.ndarray:
        '''Components as a float64 array of shape (2,).'''
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def fromArray(cls, values: np.ndarray) -> Vector2:
        return cls(float(values[0]), float(values[1]))
