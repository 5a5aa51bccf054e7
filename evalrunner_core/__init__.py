"""Core library for the evalrunner evaluation harness."""
