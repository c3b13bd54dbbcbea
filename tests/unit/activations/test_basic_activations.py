"""
Unit tests for basic activation functions.

Tests all 8 activation functions in src/neatdag/activations/basic_activations.py
"""

import math
import pytest

from neatdag.activations.basic_activations import (
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation,
    sin_activation,
    gauss_activation,
    abs_activation,
    activations,
    get_activation,
)


class TestActivationsDictionary:
    """Test that all activations are accessible via the activations dictionary."""

    def test_all_functions_in_dictionary(self):
        """Test that all 8 activation functions are in the dictionary."""
        expected_names = ['identity', 'clamped', 'relu', 'sigmoid', 'tanh', 'sin', 'gauss', 'abs']
        for name in expected_names:
            assert name in activations, f"{name} not found in activations dictionary"
        assert len(activations) == 8

    def test_get_activation(self):
        """Test lookup by name."""
        assert get_activation('sigmoid') is sigmoid_activation
        assert get_activation('identity') is identity_activation

    def test_get_activation_unknown_name(self):
        """Test that an unknown name raises ValueError."""
        with pytest.raises(ValueError, match="Unknown activation"):
            get_activation('softmax')


class TestActivationValues:
    """Test the values returned by the activation functions."""

    def test_identity(self):
        assert identity_activation(-3.5) == -3.5
        assert identity_activation(0.0) == 0.0

    def test_clamped(self):
        assert clamped_activation(5.0) == 1.0
        assert clamped_activation(-5.0) == -1.0
        assert clamped_activation(0.3) == pytest.approx(0.3)

    def test_relu(self):
        assert relu_activation(-2.0) == 0.0
        assert relu_activation(2.0) == 2.0

    def test_sigmoid_midpoint_and_range(self):
        """Test that the sigmoid is 0.5 at the origin and bounded by (0, 1)."""
        assert sigmoid_activation(0.0) == pytest.approx(0.5)
        assert 0.0 <= sigmoid_activation(-1000.0) < 1e-10
        assert 1.0 - 1e-10 < sigmoid_activation(1000.0) <= 1.0

    def test_sigmoid_is_steepened(self):
        """Test the 4.9 slope factor."""
        assert sigmoid_activation(1.0) == pytest.approx(1.0 / (1.0 + math.exp(-4.9)))

    def test_tanh_and_sin(self):
        assert tanh_activation(0.5) == pytest.approx(math.tanh(0.5))
        assert sin_activation(0.5) == pytest.approx(math.sin(0.5))

    def test_gauss(self):
        assert gauss_activation(0.0) == pytest.approx(1.0)
        assert gauss_activation(10.0) == pytest.approx(math.exp(-5.0 * 3.4 ** 2))

    def test_abs(self):
        assert abs_activation(-2.5) == 2.5

    def test_results_are_python_floats(self):
        """Test that every function returns a plain float for a float input."""
        for name, func in activations.items():
            assert isinstance(func(0.25), float), name
