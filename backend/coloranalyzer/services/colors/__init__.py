"""
Color Analyzer Colors Module

Quantized histogram, ranking, HSL naming and aggregate statistics for
the color analysis pipeline.
"""
