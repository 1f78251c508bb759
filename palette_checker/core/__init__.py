"""Foundation layer: colour math, contrast, the scale engine and palette analysis.

Nothing here imports from palette_checker.checks or palette_checker.audit.
"""
