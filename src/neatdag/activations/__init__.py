"""
Activations Package

This package provides the scalar activation functions applied by genome nodes.
A genome stores one activation callable, shared by all of its nodes.

Exported:
    activations:    Dictionary mapping activation function names to functions
    get_activation: Look up an activation function by name
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, sigmoid_activation, tanh_activation,
                                     sin_activation, gauss_activation, abs_activation
"""

from neatdag.activations.basic_activations import (
    activations,
    get_activation,
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation,
    sin_activation,
    gauss_activation,
    abs_activation
)

__all__ = [
    'activations',
    'get_activation',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'sigmoid_activation',
    'tanh_activation',
    'sin_activation',
    'gauss_activation',
    'abs_activation'
]
