"""
Utility Package.

Console and logging helpers shared by the optimizer.
"""
