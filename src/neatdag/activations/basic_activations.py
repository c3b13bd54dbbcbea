import numpy as np

def identity_activation(z):
    return z

def clamped_activation(z):
    return float(np.clip(z, -1.0, 1.0))

def relu_activation(z):
    return float(np.maximum(0.0, z))

def sigmoid_activation(z):
    # Steepened logistic, slope 4.9 at the origin
    Z = np.clip(4.9 * z, -100, 100)   # to prevent under/overflow when calculating exp
    return float(1.0 / (1.0 + np.exp(-Z)))

def tanh_activation(z):
    return float(np.tanh(z))

def sin_activation(z):
    return float(np.sin(z))

def gauss_activation(z):
    z_clipped = np.clip(z, -3.4, 3.4)
    return float(np.exp(-5.0 * z_clipped ** 2))

def abs_activation(z):
    return float(np.abs(z))

activations = {
    "identity": identity_activation,
    "clamped" : clamped_activation,
    "relu"    : relu_activation,
    "sigmoid" : sigmoid_activation,
    "tanh"    : tanh_activation,
    "sin"     : sin_activation,
    "gauss"   : gauss_activation,
    "abs"     : abs_activation
    }

def get_activation(name: str):
    """
    Look up an activation function by name.

    Raises:
        ValueError: if 'name' is not a known activation function
    """
    if name not in activations:
        raise ValueError(f"Unknown activation function '{name}'")
    return activations[name]
