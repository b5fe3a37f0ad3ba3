"""A small multilayer perceptron with one hidden layer."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def identity(z: float) -> float:
    """Identity activation."""
    return float(z)


def sigmoid(z: float) -> float:
    """Logistic activation, safe for large magnitudes."""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    try:
        e = math.exp(z)
    except OverflowError:
        return 0.0
    return e / (1.0 + e)


def tanhyper(z: float) -> float:
    """Hyperbolic tangent activation."""
    return math.tanh(z)


def d_identity(z: float) -> float:
    """Derivative of the identity activation: 1 for every input."""
    return float(z) ** 0


def d_sigmoid(z: float) -> float:
    """Derivative of the sigmoid, given the sigmoid's output."""
    return z * (1.0 - z)


def d_tanhyper(z: float) -> float:
    """Derivative of tanh, given the tanh output."""
    return 1.0 - z * z


@dataclass
class MLP:
    """Perceptron with a sigmoid hidden layer and a linear output layer.

    Each weight row ends with the neuron's bias.
    """

    input_layer_length: int
    hidden_layer_length: int
    output_layer_length: int
    hidden_layer_weights: list[list[float]]
    output_layer_weights: list[list[float]]
    max_epochs: int = 0
    learning_rate: float = 0.0
    threshold: float = 0.0
    hidden_layer_outputs: list[float] = field(default_factory=list)
    output_layer_outputs: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.hidden_layer_weights) != self.hidden_layer_length or any(
            len(row) != self.input_layer_length + 1 for row in self.hidden_layer_weights
        ):
            raise ValueError("hidden layer weights do not match the layer sizes")
        if len(self.output_layer_weights) != self.output_layer_length or any(
            len(row) != self.hidden_layer_length + 1 for row in self.output_layer_weights
        ):
            raise ValueError("output layer weights do not match the layer sizes")
        self.hidden_layer_weights = [list(row) for row in self.hidden_layer_weights]
        self.output_layer_weights = [list(row) for row in self.output_layer_weights]
        self.hidden_layer_outputs = [0.0] * self.hidden_layer_length
        self.output_layer_outputs = [0.0] * self.output_layer_length

    def forward(self, x: Sequence[float]) -> list[float]:
        """Propagate one input vector and return the output layer's values."""
        if len(x) != self.input_layer_length:
            raise ValueError(
                f"expected {self.input_layer_length} inputs, got {len(x)}"
            )
        self.hidden_layer_outputs = [
            sigmoid(sum(w * xi for w, xi in zip(row, x)) + row[-1])
            for row in self.hidden_layer_weights
        ]
        self.output_layer_outputs = [
            identity(sum(w * h for w, h in zip(row, self.hidden_layer_outputs)) + row[-1])
            for row in self.output_layer_weights
        ]
        return list(self.output_layer_outputs)

    def backpropagation(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[Sequence[float]],
    ) -> list[float]:
        """Train by gradient descent; return the mean squared error of each epoch.

        Training stops when the error falls to the threshold or the epoch
        limit is reached.
        """
        if len(inputs) != len(targets):
            raise ValueError("inputs and targets must have the same number of samples")
        if not inputs:
            raise ValueError("at least one training sample is required")
        for target in targets:
            if len(target) != self.output_layer_length:
                raise ValueError(
                    f"expected {self.output_layer_length} targets per sample"
                )

        rate = self.learning_rate
        errors: list[float] = []
        quad_error = 2 * self.threshold
        epoch = 0
        while quad_error > self.threshold and epoch < self.max_epochs:
            quad_error = 0.0
            for x, y in zip(inputs, targets):
                self.forward(x)
                hidden = self.hidden_layer_outputs
                outputs = self.output_layer_outputs

                for row, target, out in zip(self.output_layer_weights, y, outputs):
                    error = target - out
                    quad_error += error**2
                    grad = -2 * error * d_identity(out)
                    for k, h in enumerate(hidden):
                        row[k] -= rate * grad * h
                    row[-1] -= rate * grad

                for j, (row, h) in enumerate(zip(self.hidden_layer_weights, hidden)):
                    total = sum(
                        -2 * (target - out) * d_identity(out) * out_row[j]
                        for out_row, target, out in zip(
                            self.output_layer_weights, y, outputs
                        )
                    )
                    delta = rate * total * d_sigmoid(h)
                    for k, xi in enumerate(x):
                        row[k] -= delta * xi
                    row[-1] -= delta

            quad_error /= len(inputs)
            epoch += 1
            errors.append(quad_error)
            logger.info("Erro medio: %f", quad_error)
        return errors


def create_model(
    input_layer_length: int,
    hidden_layer_length: int,
    output_layer_length: int,
    max_epochs: int,
    learning_rate: float,
    threshold: float,
    rng: random.Random | None = None,
) -> MLP:
    """Build an MLP with weights drawn uniformly from [-0.5, 0.5)."""
    if min(input_layer_length, hidden_layer_length, output_layer_length) < 1:
        raise ValueError("every layer needs at least one neuron")
    rng = rng if rng is not None else random.Random()

    def draw() -> float:
        return rng.random() - 0.5

    hidden = [
        [draw() for _ in range(input_layer_length + 1)]
        for _ in range(hidden_layer_length)
    ]
    output = [
        [draw() for _ in range(hidden_layer_length + 1)]
        for _ in range(output_layer_length)
    ]
    return MLP(
        input_layer_length=input_layer_length,
        hidden_layer_length=hidden_layer_length,
        output_layer_length=output_layer_length,
        hidden_layer_weights=hidden,
        output_layer_weights=output,
        max_epochs=max_epochs,
        learning_rate=learning_rate,
        threshold=threshold,
    )