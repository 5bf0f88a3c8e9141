"""
Val & Debt Package
==================

Catch assets, dodge liabilities. This package holds the frame simulation,
scoring rules, spawner, renderer and the Gymnasium wrapper.

All tunable parameters are in game_config.yaml.
"""
