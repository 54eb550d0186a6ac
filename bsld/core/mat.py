"""
Boskeopolis Land Data - 3x3 Matrices

Row-major 3x3 matrices for 2D block/tile/pixel coordinate transforms.
Each operation multiplies on the right: m.translate(v).scale(s) applies
the scale to a point first, then the translation.
"""

from dataclasses import dataclass

IDENTITY = (1, 0, 0, 0, 1, 0, 0, 0, 1)


def _multiply(a: tuple, b: tuple) -> tuple:
    return tuple(
        sum(a[row * 3 + k] * b[k * 3 + col] for k in range(3))
        for row in range(3)
        for col in range(3)
    )


@dataclass(frozen=True)
class Mat3:
    values: tuple = IDENTITY

    def get_list(self) -> list:
        return list(self.values)

    def translate(self, v: tuple[float, float]) -> "Mat3":
        return Mat3(_multiply(self.values, (1, 0, v[0], 0, 1, v[1], 0, 0, 1)))

    def scale(self, v: tuple[float, float]) -> "Mat3":
        return Mat3(_multiply(self.values, (v[0], 0, 0, 0, v[1], 0, 0, 0, 1)))

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        """Transform a 2D point (homogeneous w = 1)."""
        x, y = point
        m = self.values
        return (m[0] * x + m[1] * y + m[2], m[3] * x + m[4] * y + m[5])


def create_mat3(values=IDENTITY) -> Mat3:
    values = tuple(values)
    if len(values) != 9:
        raise ValueError(f"Mat3 needs 9 values, got {len(values)}")
    return Mat3(values)
