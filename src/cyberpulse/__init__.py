"""
CyberPulse: audio-reactive spectrum, particle and pulse visualizer.
"""

__version__ = "0.3.0"
