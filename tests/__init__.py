"""Test package for the Reaction Trainer.

The core tests drive the GameController with a fake clock and a manual
sleeper so every phase transition happens exactly when the test releases
it. The UI smoke tests run headlessly using pygame's dummy video driver.
To run these tests, execute ``pytest`` from the project root.
"""
