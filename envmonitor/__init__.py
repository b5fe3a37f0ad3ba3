"""Environmental monitoring with a trained multilayer perceptron and MQTT reporting."""

__version__ = "0.1.0"
__all__ = ["mlp", "environment", "station"]