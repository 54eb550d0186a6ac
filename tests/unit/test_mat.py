"""Unit tests for 3x3 matrix helpers."""

import pytest

from bsld.core.mat import Mat3, create_mat3


class TestMat3:
    """Test matrix composition."""

    def test_identity(self):
        assert create_mat3().get_list() == [1, 0, 0, 0, 1, 0, 0, 0, 1]

    def test_translate(self):
        assert create_mat3().translate((1, 2)).get_list() == [1, 0, 1, 0, 1, 2, 0, 0, 1]

    def test_scale(self):
        assert create_mat3().scale((2, 3)).get_list() == [2, 0, 0, 0, 3, 0, 0, 0, 1]

    def test_translate_then_scale(self):
        """Scale is applied to points before the translation."""
        combined = create_mat3().translate((1, 2)).scale((2, 3))
        assert combined.get_list() == [2, 0, 1, 0, 3, 2, 0, 0, 1]

    def test_scale_then_translate(self):
        combined = create_mat3().scale((2, 3)).translate((1, 2))
        assert combined.get_list() == [2, 0, 2, 0, 3, 6, 0, 0, 1]

    def test_apply(self):
        block_to_pixel = create_mat3().scale((16, 16))
        assert block_to_pixel.apply((3, 4)) == (48, 64)
        assert create_mat3().scale((2, 3)).translate((1, 2)).apply((0, 0)) == (2, 6)

    def test_immutable(self):
        identity = Mat3()
        identity.translate((5, 5))
        assert identity.get_list() == [1, 0, 0, 0, 1, 0, 0, 0, 1]

    def test_wrong_size(self):
        with pytest.raises(ValueError, match="9 values"):
            create_mat3([1, 0, 0])
