"""
Test package for the scenario timeline engine.

v1.0: Unit tests for classification, scaling, playback, alarm sessions and
result flagging.
"""
