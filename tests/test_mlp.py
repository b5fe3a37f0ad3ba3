import math
import random

import pytest

from envmonitor.mlp import (
    MLP,
    create_model,
    d_identity,
    d_sigmoid,
    d_tanhyper,
    identity,
    sigmoid,
    tanhyper,
)


def test_activation_values():
    assert identity(3.25) == 3.25
    assert sigmoid(0.0) == 0.5
    assert tanhyper(0.0) == 0.0
    assert d_identity(42.0) == 1.0
    assert d_sigmoid(0.5) == 0.25
    assert d_tanhyper(0.0) == 1.0


@pytest.mark.parametrize("z", [-2000.0, -5.0, -0.3, 0.0, 0.7, 5.0, 2000.0])
def test_sigmoid_range_and_symmetry(z):
    s = sigmoid(z)
    assert 0.0 <= s <= 1.0
    assert sigmoid(-z) == pytest.approx(1.0 - s)


def test_tanhyper_matches_math():
    for z in (-1.5, 0.2, 3.0):
        assert tanhyper(z) == math.tanh(z)


def _zero_hidden_model(bias):
    return MLP(
        input_layer_length=2,
        hidden_layer_length=3,
        output_layer_length=1,
        hidden_layer_weights=[[0.0, 0.0, 0.0] for _ in range(3)],
        output_layer_weights=[[0.0, 0.0, 0.0, bias]],
    )


def test_forward_returns_bias_when_hidden_weights_zero():
    model = _zero_hidden_model(0.75)
    assert model.forward([10.0, -4.0]) == [0.75]
    assert model.hidden_layer_outputs == [0.5, 0.5, 0.5]
    assert model.output_layer_outputs == [0.75]


def test_forward_rejects_wrong_length():
    model = _zero_hidden_model(0.0)
    with pytest.raises(ValueError):
        model.forward([1.0])


def test_mismatched_weight_shapes_rejected():
    with pytest.raises(ValueError):
        MLP(
            input_layer_length=2,
            hidden_layer_length=1,
            output_layer_length=1,
            hidden_layer_weights=[[0.0, 0.0]],
            output_layer_weights=[[0.0, 0.0]],
        )


def test_create_model_shapes_and_range():
    model = create_model(4, 10, 1, 5, 0.1, 0.01, random.Random(1))
    assert len(model.hidden_layer_weights) == 10
    assert all(len(row) == 5 for row in model.hidden_layer_weights)
    assert len(model.output_layer_weights) == 1
    assert len(model.output_layer_weights[0]) == 11
    weights = [w for row in model.hidden_layer_weights + model.output_layer_weights for w in row]
    assert all(-0.5 <= w < 0.5 for w in weights)


def test_create_model_is_reproducible_with_seed():
    a = create_model(3, 4, 2, 1, 0.1, 0.0, random.Random(7))
    b = create_model(3, 4, 2, 1, 0.1, 0.0, random.Random(7))
    assert a.hidden_layer_weights == b.hidden_layer_weights
    assert a.output_layer_weights == b.output_layer_weights


def test_create_model_rejects_empty_layer():
    with pytest.raises(ValueError):
        create_model(0, 4, 1, 1, 0.1, 0.0, random.Random(0))


def test_training_reduces_error():
    model = create_model(1, 3, 1, 300, 0.1, 0.0, random.Random(3))
    inputs = [[0.0], [0.5], [1.0]]
    targets = [[0.0], [0.5], [1.0]]
    errors = model.backpropagation(inputs, targets)
    assert len(errors) == 300
    assert errors[-1] < errors[0]


def test_training_stops_at_threshold():
    model = create_model(1, 2, 1, 50, 0.1, 1e9, random.Random(3))
    errors = model.backpropagation([[0.0]], [[1.0]])
    assert len(errors) == 1


def test_training_with_zero_epochs_leaves_weights():
    model = create_model(1, 2, 1, 0, 0.1, 0.0, random.Random(3))
    before = [list(row) for row in model.hidden_layer_weights]
    assert model.backpropagation([[0.0]], [[1.0]]) == []
    assert model.hidden_layer_weights == before


def test_training_rejects_bad_samples():
    model = create_model(1, 2, 1, 5, 0.1, 0.0, random.Random(3))
    with pytest.raises(ValueError):
        model.backpropagation([], [])
    with pytest.raises(ValueError):
        model.backpropagation([[0.0]], [[1.0], [0.0]])
    with pytest.raises(ValueError):
        model.backpropagation([[0.0]], [[1.0, 2.0]])