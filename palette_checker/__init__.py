"""palette-tool: perceptually uniform colour scales and palette audits."""

__version__ = '0.1.0'
