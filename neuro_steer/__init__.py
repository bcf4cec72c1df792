"""
Neuro-Steer: Neural Network Steering in a Bounded Arena

Agents chase a target using small feedforward networks with
random, fixed weights. Watch what untrained brains do.
"""

__version__ = "0.1.0"
