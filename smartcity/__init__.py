"""
Quantum Smart City DePIN Simulation

A headless, timer-driven state engine for an illustrative smart city:
a quantum-bit register gates a DePIN sensor network, an annealing score
biases building and traffic efficiencies, and a toy ledger records transfers.

Architecture: the engine is the source of truth. Renderers and charts are
consumers of the immutable snapshots it publishes.
"""

__version__ = "0.1.0"
